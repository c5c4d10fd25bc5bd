"""
RAG answer prompt.

Defines the chat prompt used to answer a question from retrieved document
context. The context block comes from the context assembler; earlier
conversation turns fill the optional history placeholder.

Dependencies: langchain_core.prompts
System role: Prompt template for grounded answers
"""

from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

SYSTEM_PROMPT = """You are a helpful assistant that answers questions about the user's uploaded documents.

## Instructions
1. Answer the user's query based *only* on the provided document context
2. If the context is insufficient, say you couldn't find an answer in the documents
3. Do not invent facts, names or numbers that are not in the context
4. When several sources support the answer, mention the source file names
5. Use the earlier conversation only to understand follow-up questions; facts still come from the context
6. Be concise and direct

## Context Format
Each context block starts with "Source:" naming the file it came from,
followed by "Content:" with the excerpt. Blocks are separated by "---"."""

RAG_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    MessagesPlaceholder("history", optional=True),
    ("human", """Document context:
{context}

Question: {question}"""),
])


def get_rag_prompt() -> ChatPromptTemplate:
    """
    Get the RAG answer prompt template.

    Returns:
        ChatPromptTemplate: Prompt with `context` and `question` variables
            and an optional `history` message list
    """
    return RAG_PROMPT
