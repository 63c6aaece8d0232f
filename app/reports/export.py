from io import BytesIO

from openpyxl import Workbook

HEADERS = [
    'Folio', 'Fecha', 'Hora', 'Tipo', 'Severidad', 'Estado', 'Área', 'Ubicación',
    'Descripción', 'Responsable', 'Compromiso', 'Aviso SAP', 'Creado Por', 'Fecha Creación',
]


def reports_workbook(reports):
    """Genera un archivo XLSX con una fila por reporte y lo devuelve como bytes."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Reportes"
    worksheet.append(HEADERS)

    for report in reports:
        created_at = report.get('createdAt')
        worksheet.append([
            report.get('folio', ''),
            report.get('fecha', ''),
            report.get('hora', ''),
            report.get('tipo', ''),
            report.get('severidad', ''),
            report.get('status') or 'pendiente',
            report.get('area', ''),
            report.get('ubicacion', ''),
            report.get('descripcion', ''),
            report.get('responsable', ''),
            report.get('compromiso', ''),
            report.get('sapAviso', ''),
            report.get('ownerName', ''),
            created_at.strftime('%d/%m/%Y %H:%M') if created_at else '',
        ])

    output = BytesIO()
    workbook.save(output)
    output.seek(0)
    return output.read()
