"""
Error taxonomy shared by the codecs, the document store and the services.

Handlers map every ``NotFoundError`` to 404 and any other
``DocumentStoreError`` to 500.
"""


class DocumentStoreError(Exception):
    """Base class for all document store failures."""


class UnsupportedFormatError(DocumentStoreError):
    """The encoding tag or file extension is not one of json, yaml, xml."""


class ParseError(DocumentStoreError):
    """The bytes on disk are not well-formed for the claimed encoding."""


class SerializationError(DocumentStoreError):
    """The tree holds a value the target encoding cannot represent."""


class StorageIOError(DocumentStoreError):
    """Reading or writing the document file failed at the OS level."""


class NotFoundError(DocumentStoreError):
    """The addressed entity does not exist."""


class DocumentNotFoundError(NotFoundError):
    pass


class CollectionNotFoundError(NotFoundError):
    pass


class RecordNotFoundError(NotFoundError):
    pass


class BatchNotFoundError(NotFoundError):
    pass
