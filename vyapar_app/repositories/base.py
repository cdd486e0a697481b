# ==============================================================================
# REPOSITORIO BASE - Almacén clave/valor y colecciones JSON
# ==============================================================================
# Dos capas:
#   1. Store: guarda/lee un blob de bytes bajo una clave (adaptador de
#      persistencia). JSONFileStore usa un archivo por clave; MemoryStore
#      es el reemplazo en memoria para tests.
#   2. CollectionRepository: una colección (lista JSON de objetos) guardada
#      bajo UNA clave del store.
# ==============================================================================

import json
import logging
import os
import threading
from typing import Any, Callable, Dict, List, Optional, TypeVar

from vyapar_app.errors import CorruptData, StorageUnavailable

logger = logging.getLogger(__name__)

T = TypeVar('T')


class JSONFileStore:
    """
    Store persistente en disco: <base_path>/<key>.json

    Una clave ausente (primer arranque) retorna None.
    Errores de I/O se convierten en StorageUnavailable.
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio donde viven los archivos de datos
        """
        self.base_path = base_path
        try:
            os.makedirs(base_path, exist_ok=True)
        except OSError as e:
            logger.error("[STORAGE] No se pudo crear %s: %s", base_path, e)
            raise StorageUnavailable(f"Cannot create data directory {base_path}: {e}") from e

    def _path(self, key: str) -> str:
        return os.path.join(self.base_path, f'{key}.json')

    def load(self, key: str) -> Optional[bytes]:
        """
        Lee el blob guardado bajo la clave.

        Returns:
            Bytes guardados o None si la clave no existe
        """
        path = self._path(key)
        with self._file_lock:
            try:
                with open(path, 'rb') as f:
                    return f.read()
            except FileNotFoundError:
                return None
            except OSError as e:
                logger.error("[STORAGE] Error leyendo %s: %s", path, e)
                raise StorageUnavailable(f"Cannot read '{key}': {e}") from e

    def store(self, key: str, data: bytes) -> None:
        """
        Escribe el blob bajo la clave.
        Escribe a archivo temporal primero y luego reemplaza el original.
        """
        path = self._path(key)
        with self._file_lock:
            temp_path = path + '.tmp'
            try:
                with open(temp_path, 'wb') as f:
                    f.write(data)
                os.replace(temp_path, path)
            except OSError as e:
                # Limpiar archivo temporal si algo falla
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                logger.error("[STORAGE] Error escribiendo %s: %s", path, e)
                raise StorageUnavailable(f"Cannot write '{key}': {e}") from e


class MemoryStore:
    """Store en memoria con el mismo contrato que JSONFileStore."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def store(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def keys(self) -> List[str]:
        return list(self._data)


class CollectionRepository:
    """
    Colección de registros guardada como lista JSON bajo una clave.

    Cada operación relee la colección completa desde el store y la reescribe
    entera al modificarla (último escritor gana).

    Ejemplo: vyapar_inventory -> [{...}, {...}]
    """

    def __init__(self, store, key: str):
        """
        Args:
            store: Adaptador de persistencia (load/store de bytes)
            key: Clave de la colección en el store
        """
        self.store = store
        self.key = key

    def _read_raw(self) -> List[Dict[str, Any]]:
        """
        Lee y decodifica la colección.

        Raises:
            CorruptData: JSON inválido o estructura inesperada
            StorageUnavailable: El store no pudo leer
        """
        blob = self.store.load(self.key)
        if blob is None:
            return []
        try:
            data = json.loads(blob.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("[STORAGE] '%s' corrupto: %s", self.key, e)
            raise CorruptData(self.key, str(e)) from e
        if not isinstance(data, list):
            logger.error("[STORAGE] '%s' no es una lista", self.key)
            raise CorruptData(self.key, 'expected a JSON array')
        if not all(isinstance(record, dict) for record in data):
            logger.error("[STORAGE] '%s' contiene registros inválidos", self.key)
            raise CorruptData(self.key, 'expected an array of objects')
        return data

    def _decode(self, record: Dict[str, Any], factory: Callable[[Dict[str, Any]], T]) -> T:
        """
        Convierte un registro con `factory` (p. ej. InventoryItem.from_dict).

        Raises:
            CorruptData: Faltan campos o tienen tipos inesperados
        """
        try:
            return factory(record)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("[STORAGE] Registro inválido en '%s': %r", self.key, e)
            raise CorruptData(self.key, f"invalid record: {e!r}") from e

    def _write_raw(self, data: List[Dict[str, Any]]) -> None:
        blob = json.dumps(data, indent=2, ensure_ascii=False).encode('utf-8')
        self.store.store(self.key, blob)

    def get_all(self) -> List[Dict[str, Any]]:
        """Obtiene todos los registros en el orden guardado."""
        return self._read_raw()

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        self._write_raw(data)

    def append(self, record: Dict[str, Any]) -> None:
        """Agrega un registro al final."""
        data = self.get_all()
        data.append(record)
        self._write_raw(data)

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """
        Busca un registro por un campo específico.

        Returns:
            Primer registro que coincide o None
        """
        for record in self.get_all():
            if record.get(field) == value:
                return record
        return None

    def remove_where(self, field: str, value: Any) -> bool:
        """
        Elimina los registros que coinciden con un campo.
        La colección se reescribe igual aunque no haya coincidencias.

        Returns:
            True si se eliminó al menos un registro
        """
        data = self.get_all()
        kept = [r for r in data if r.get(field) != value]
        self._write_raw(kept)
        return len(kept) != len(data)
