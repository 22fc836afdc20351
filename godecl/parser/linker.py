"""
Method to receiver-type linking.

After a file is walked, each method is attached to the struct or named
type declared in the same file that its receiver refers to.
"""

import logging
from typing import Dict, List, Optional, Union

from ..models.entities import File, FileType, Method, NameType, PointerType, Struct

logger = logging.getLogger(__name__)


def common_receiver_name(method: Method) -> Optional[str]:
    """
    Type name of a ``T`` or ``*T`` receiver.

    Returns:
        The name, or None for receivers of any other shape
    """
    receiver_type = method.receiver.type
    if isinstance(receiver_type, PointerType):
        if receiver_type.count != 1:
            return None
        receiver_type = receiver_type.next
    if isinstance(receiver_type, NameType):
        return receiver_type.name
    return None


class MethodLinker:
    """
    Appends every method of a File to its owner's ``methods`` list.

    Methods whose receiver is not a common receiver, or names no type of
    this file, stay only in ``File.methods`` and are reported in
    ``warnings``.
    """

    def __init__(self):
        self.warnings: List[str] = []

    def link(self, file: File) -> File:
        owners = self._owners(file)
        linked = 0

        for method in file.methods:
            name = common_receiver_name(method)
            if name is None:
                self._warn(f"method {method.name} has an uncommon receiver {method.receiver.render()}")
                continue

            owner = owners.get(name)
            if owner is None:
                self._warn(f"method {method.name} receiver {name} is not declared in this file")
                continue

            owner.methods.append(method)
            linked += 1

        logger.debug(f"Linked {linked}/{len(file.methods)} methods in package {file.name}")
        return file

    def _owners(self, file: File) -> Dict[str, Union[Struct, FileType]]:
        owners: Dict[str, Union[Struct, FileType]] = {t.name: t for t in file.types}
        owners.update((s.name, s) for s in file.structs)
        return owners

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)
