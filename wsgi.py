# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── vyapar_app/      <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# Variables de entorno: VYAPAR_DATA_DIR, VYAPAR_SECRET_KEY, VYAPAR_LOG_LEVEL
# ==============================================================================

import os

from vyapar_app.main import create_app

app = create_app()

if __name__ == '__main__':
    # Configuración para desarrollo local
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
    PORT = int(os.environ.get('FLASK_PORT', 5000))
    app.run(debug=DEBUG, host=HOST, port=PORT)
