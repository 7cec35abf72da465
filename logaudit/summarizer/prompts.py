"""
Prompts for the open-ended log summary.
"""

SYSTEM_PROMPT = """You are an expert log file analysis system.
Your task is to thoroughly analyze log file content and identify three distinct categories of issues:
1. **Errors**: Find all explicit error messages, stack traces, fatal errors, or messages indicating a definitive failure.
2. **Warnings**: Find all messages that indicate a potential problem but are not critical failures. This includes deprecation notices, performance warnings, or unusual but non-failing states.
3. **Incomplete Transactions**: Identify any processes, sessions, handshakes, or data transfers that are initiated but do not have a corresponding success, completion, or termination message within the provided log. For example, a 'session started' without a 'session ended'.

Review the entire log and extract these items. Each item should be a direct quote or a concise summary of one issue.

Return ONLY valid JSON (no markdown) with exactly these keys:
{
  "errors": ["..."],
  "warnings": ["..."],
  "incomplete_transactions": ["..."]
}
If a category has no items, return an empty array for it."""


USER_PROMPT_TEMPLATE = '''Log Content to Analyze:
"""
{log_content}
"""'''


def build_user_prompt(log_content: str) -> str:
    return USER_PROMPT_TEMPLATE.format(log_content=log_content)
