"""Prompts and tool schemas sent to the language model."""

from models.search import SearchResult

SEARCH_REQUIRED_TOOL_NAME = "search_required"

DECISION_SYSTEM_PROMPT = """You are an intent classification model. Decide whether a user query can only be answered with additional information from an internet search. Always answer by calling the search_required tool.

Instructions:
- Set search_required to true when the query needs real-time data, retrieval of specific information, or content the model is unlikely to already know. In that case also set query to a clear, complete natural-language question to search for. Fix spelling and grammar; do not reduce it to a list of keywords.
- Set search_required to false when the query can be answered from general knowledge, static facts, or content that is reasonably within the model's scope. Leave query out."""

SEARCH_REQUIRED_TOOL = {
    "type": "function",
    "function": {
        "name": SEARCH_REQUIRED_TOOL_NAME,
        "description": "Use to search the internet to answer a query.",
        "parameters": {
            "type": "object",
            "properties": {
                "search_required": {
                    "type": "boolean",
                    "description": "Whether an internet search is required to answer the query.",
                },
                "query": {
                    "type": "string",
                    "description": "The query to search if search is required.",
                },
            },
            "required": ["search_required"],
        },
    },
}

SEARCH_REQUIRED_TOOL_CHOICE = {"type": "function", "function": {"name": SEARCH_REQUIRED_TOOL_NAME}}

SUMMARY_SYSTEM_PROMPT = """You are a research assistant. You are given internet search results for a user's question.
Write a concise, numbered summary of the findings that answers the question. Use only the information in the results, cite the result number in brackets after each point, and say so plainly if the results do not answer the question."""


def build_decision_messages(query: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": DECISION_SYSTEM_PROMPT},
        {"role": "user", "content": query},
    ]


def format_results(results: list[SearchResult]) -> str:
    blocks = []
    for idx, result in enumerate(results, start=1):
        blocks.append(f"[{idx}] {result.site_name}\nURL: {result.url}\n{result.text_content}")
    return "\n\n".join(blocks)


def build_summary_messages(query: str, results: list[SearchResult]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": f"Search results:\n\n{format_results(results)}\n\nQuestion: {query}",
        },
    ]
