# run.py

from app import create_app # Importa tu función de fábrica
import os

# ----------------------------------------------------

# Lee la configuración del entorno o usa 'development' por defecto
config_name = os.environ.get('FLASK_CONFIG', 'development')
app = create_app(config_name)

# ----------------------------------------------------------------

if __name__ == '__main__':
    # Puerto desde variable de entorno o valor por defecto
    port = int(os.environ.get('PORT', 8080))
    app.run(debug=app.debug, host='0.0.0.0', port=port)
