from dataclasses import dataclass


@dataclass
class ReviewFile:
    path: str
    patch: str
    content: str = ""


SYSTEM_PROMPT = """You are an AI code reviewer. Review the pull request changes below.

Respond in language: {language}.

Return ONLY valid JSON in this exact format:
```json
{{
  "summary": "<overall review summary in markdown>",
  "comments": [
    {{
      "path": "<file path exactly as shown after 'File:'>",
      "line": <line number in the NEW file>,
      "priority": "critical|high|medium|low",
      "body": "<your comment in markdown>"
    }}
  ]
}}
```

Important:
- Only comment on the changed lines (from the diff)
- Use EXACTLY the line numbers shown in the numbered file listing (the number before the | symbol)
- Use priority "critical" for bugs and security issues that must be fixed before merging
- Do not add fields other than "summary" and "comments"
- Escape code blocks inside "body" as regular JSON strings, use \\n for newlines
- If the code looks good, return an empty comments array"""


PR_PROMPT = """Pull request: {title}
{description_block}
{files_block}

Review the changes and respond with JSON. Use the line numbers shown above."""


FILE_BLOCK = """File: {path}

Full file with line numbers:
```
{numbered_content}
```

Changes (diff):
```diff
{patch}
```"""


def _add_line_numbers(content: str) -> str:
    """Add line numbers to file content for accurate LLM referencing."""
    lines = content.split("\n")
    width = len(str(len(lines)))
    return "\n".join(f"{i + 1:>{width}}| {line}" for i, line in enumerate(lines))


def build_review_prompt(
    title: str,
    files: list[ReviewFile],
    language: str = "en",
    description: str = "",
) -> str:
    """Build the complete prompt for a pull request review."""
    system = SYSTEM_PROMPT.format(language=language)

    description_block = ""
    if description and description.strip():
        description_block = f"\nDescription:\n```\n{description.strip()}\n```\n"

    files_block = "\n\n".join(
        FILE_BLOCK.format(
            path=f.path,
            numbered_content=_add_line_numbers(f.content),
            patch=f.patch,
        )
        for f in files
    )

    user = PR_PROMPT.format(
        title=title,
        description_block=description_block,
        files_block=files_block,
    )

    return f"{system}\n\n{user}"
