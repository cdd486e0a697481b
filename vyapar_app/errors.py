# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Todas las capas (repositorios, servicios, rutas) lanzan y capturan estas
# excepciones. Los casos "no encontrado" NO son errores: update/delete de un
# id inexistente es un no-op silencioso.
# ==============================================================================


class VyaparError(Exception):
    """Excepción base de la aplicación."""
    pass


class ValidationError(VyaparError):
    """
    Entrada inválida: nombre vacío, cantidad o precio fuera de rango,
    selección requerida ausente, stock insuficiente (validación del llamador).
    El mensaje se muestra tal cual al usuario.
    """
    pass


class StorageError(VyaparError):
    """Falla del almacenamiento persistente."""
    pass


class StorageUnavailable(StorageError):
    """El almacenamiento no se puede leer ni escribir (error de I/O)."""
    pass


class CorruptData(StorageError):
    """
    Los datos guardados bajo una clave no se pueden decodificar.
    Nunca se reemplazan por una colección vacía: eso ocultaría la pérdida
    real de registros de inventario o facturas.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupt data under '{key}': {reason}")
