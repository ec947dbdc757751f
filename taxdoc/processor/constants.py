PAGE_BREAK = "\n--- PAGE BREAK ---\n"
EXTRACTION_FAILED_TEXT = "Failed to extract text"
