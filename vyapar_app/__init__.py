# ==============================================================================
# VYAPAR - Inventario, facturas y analítica para pequeños negocios
# ==============================================================================
#
# ESTRUCTURA:
# ├── config.py          → Constantes, variables de entorno, logging
# ├── errors.py          → Excepciones del dominio
# ├── models/            → Entidades (dataclasses)
# ├── repositories/      → Store clave/valor + colecciones JSON
# ├── services/          → Facturación (validación) y analítica
# ├── app_container.py   → Inyección de dependencias
# └── main.py            → API JSON (Flask)
# ==============================================================================

__version__ = '1.0.0'
