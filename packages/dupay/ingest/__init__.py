"""Statement ingestion: document text extraction and bank-specific parsing."""
