"""
Fixed user-facing messages for the empty and no-result paths.

These are literals on purpose: tests assert on them, and a UI can match
them to show its own guidance.
"""

NO_DOCUMENTS_SELECTED = (
    "No documents are selected. Select at least one PDF and ask your question again."
)

NO_CHUNKS_FOUND = (
    "No text chunks were found in the selected PDFs. "
    "Check that the documents finished processing."
)

NO_INFORMATION_APOLOGY = (
    "Sorry, I could not find information related to your question in the uploaded PDFs. "
    "Try a more specific question, or upload a document that covers the topic."
)


def no_relevant_information(query: str, max_page: int) -> str:
    """Answer for a searched-but-unmatched query."""
    return (
        f'No information related to "{query}" was found in the uploaded PDFs.\n\n'
        f"Available pages: {max_page}\n\n"
        "Try searching with different keywords."
    )
