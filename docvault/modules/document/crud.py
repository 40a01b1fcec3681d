"""FastCRUD instance for the documents table."""

from fastcrud import FastCRUD

from .models import Document

document_crud: FastCRUD = FastCRUD(Document)
