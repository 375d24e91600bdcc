"""
Prompt templates for review generation.
"""

from enum import Enum
from typing import Iterable, Optional, Tuple


class ReviewType(str, Enum):
    GENERAL = "general"
    SECURITY = "security"


GENERAL_SYSTEM_PROMPT = """You are an expert code reviewer with deep knowledge of software engineering best practices.

Your responsibilities:
1. Identify bugs, security vulnerabilities, and logic errors
2. Suggest performance improvements
3. Ensure code follows established patterns in the codebase
4. Check for proper error handling
5. Evaluate test coverage implications
6. Review naming conventions and code clarity

Format your review as:

## Summary
[1-2 sentence overview of the changes]

## Critical Issues
[List any bugs, security issues, or breaking changes - if none, say "None found"]

## Suggestions
[Improvements and best practices recommendations]

## Questions
[Any clarifications needed from the author - if none, say "None"]

Be constructive and specific. Reference line numbers and file names when possible.
Focus on substance over style. Avoid nitpicking minor formatting issues.
"""

GENERAL_REVIEW_TEMPLATE = """# Code Review Request

## Repository: {repo_name}
{focus_section}

## Codebase Context
The following code snippets are from the existing codebase and are related to the changes being reviewed:

{context}

## Changes to Review

```diff
{diff}
```

Please provide a thorough code review based on the guidelines. Use the codebase context to understand existing patterns and check for consistency.
"""

FOCUS_SECTION_TEMPLATE = """
## Focus Areas
Please pay special attention to:
{focus_areas}
"""

SECURITY_SYSTEM_PROMPT = """You are a security-focused code reviewer specializing in identifying vulnerabilities.

Focus exclusively on security concerns:
1. Input validation and sanitization
2. Authentication and authorization flaws
3. SQL injection, XSS, CSRF vulnerabilities
4. Sensitive data exposure
5. Cryptographic issues
6. Dependency vulnerabilities
7. Race conditions and timing attacks

Format your review with severity ratings:
- **CRITICAL**: Immediate security risk, must fix before merge
- **HIGH**: Significant vulnerability, should fix before merge
- **MEDIUM**: Potential security issue, recommend fixing
- **LOW**: Minor security improvement suggestion

## Security Assessment

### Critical Issues
[List critical vulnerabilities]

### High Priority
[List high priority issues]

### Medium Priority
[List medium priority issues]

### Low Priority
[List low priority suggestions]

### Summary
[Overall security assessment]
"""

SECURITY_REVIEW_TEMPLATE = """# Security Review Request

## Repository: {repo_name}

## Codebase Context
{context}

## Changes to Review

```diff
{diff}
```

Provide a security-focused code review following the security assessment guidelines.
"""


def focus_section(focus_areas: Optional[Iterable[str]]) -> str:
    areas = list(focus_areas or [])
    if not areas:
        return ""
    return FOCUS_SECTION_TEMPLATE.format(focus_areas="\n".join(f"- {area}" for area in areas))


def get_prompts(
        review_type: ReviewType | str,
        diff: str,
        context: str,
        repo_name: str = "repository",
        focus_areas: Optional[Iterable[str]] = None,
) -> Tuple[str, str]:
    """(system_prompt, user_prompt) for a review type. Unknown types get the general review."""
    if review_type == ReviewType.SECURITY:
        return (
            SECURITY_SYSTEM_PROMPT,
            SECURITY_REVIEW_TEMPLATE.format(repo_name=repo_name, context=context, diff=diff),
        )

    return (
        GENERAL_SYSTEM_PROMPT,
        GENERAL_REVIEW_TEMPLATE.format(
            repo_name=repo_name,
            focus_section=focus_section(focus_areas),
            context=context,
            diff=diff,
        ),
    )
