from docstore.models.document import Document

__all__ = ["Document"]
