import re


def clean_json_response(content: str) -> str:
    """
    Clean JSON response from LLM by removing markdown code blocks.

    Args:
        content: The raw string response from LLM

    Returns:
        Cleaned string containing just the JSON content
    """
    # A fence wrapping the whole reply may itself contain fenced blocks.
    match = re.match(r"^\s*```(?:json)?\s*(.*)```\s*$", content, re.DOTALL)
    if match:
        return match.group(1).strip()

    match = re.search(r"```(?:json)?\s*(.*?)\s*```", content, re.DOTALL)
    if match:
        return match.group(1)

    return content.strip()


def transfer_tool_name(agent_name: str) -> str:
    """Name of the function a model calls to hand a request to ``agent_name``."""
    slug = re.sub(r"[^a-zA-Z0-9_]+", "_", agent_name).strip("_").lower()
    return f"transfer_to_{slug}"
