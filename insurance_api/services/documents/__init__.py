from insurance_api.services.documents.document_processor import DocumentProcessor

__all__ = ["DocumentProcessor"]
