"""Prompt templates for the augmented git commands."""

from __future__ import annotations

from typing import Optional, Sequence

from sgit.llm.budget import PromptSection, split_budget, truncate_content

STAGE_DECISION_MAX_CHARS = 4096
UNCLEAR_DECISION = "AI response unclear, skipping for safety"

COMMIT_DIFF = "diff"
COMMIT_BRANCH = "branch"
COMMIT_RECENT = "recent_commits"
COMMIT_FILES = "file_list"

# Shares of the word budget left after the branch name is reserved.
COMMIT_WEIGHTS = {
    COMMIT_DIFF: 0.60,
    COMMIT_FILES: 0.25,
    COMMIT_RECENT: 0.15,
}

STAGE_DECISION_TEMPLATE = """\
You are a helpful assistant that reviews files in software projects and decides whether they belong in git version control.

Decide whether the following file should be added to git:

File: {path}
Content:
{content}

Consider:
1. Is this source code, configuration or documentation that belongs in version control?
2. Is this a temporary file, a log file or a build artifact that should be ignored?
3. Does the file contain secrets such as passwords, keys or tokens?
4. Is the file generated and reproducible from source?

Respond with exactly one line:
- "YES: [brief reason]" if the file should be added
- "NO: [brief reason]" if the file should not be added

Keep the reason under 50 characters."""

COMMIT_MESSAGE_TEMPLATE = """\
You are an expert software developer who writes excellent commit messages following the Conventional Commits specification.

Analyze the changes below and capture the DEVELOPER'S INTENTION, not only the mechanics of what changed.

=== GIT DIFF ===
{diff}

=== CURRENT BRANCH ===
{branch}

=== RECENT COMMITS (last 5) ===
{recent_commits}

=== FILES CHANGED ===
{file_list}

Things to weigh:
1. Purpose: bug fix, new feature, improvement, refactor?
2. Context clues: branch naming (feature/, fix/, hotfix/), file kinds (tests, config, docs), code patterns (validation, logging, error handling).
3. Development flow: how the change continues the recent commits.
4. Impact: performance, security, user experience, developer experience, breaking changes.

Write a commit message that:
1. Uses the format type(scope): description
2. Uses one of: feat, fix, docs, style, refactor, test, chore, perf, ci, build
3. States the intention in the imperative mood ("add", not "added")
4. Adds a short body (2-3 lines) on why the change was made and what it improves
5. Mentions breaking changes only when they are real
6. Aims for a total length of roughly 200-400 characters

Intention over mechanics:
- "feat(api): enable user profile customization" rather than "feat(api): add new endpoint"
- "fix(db): prevent memory leak in long-running queries" rather than "fix(db): change query"

Respond with only the commit message, no explanations."""

DIFF_SUMMARY_TEMPLATE = """\
Analyze the following git diff and provide a structured summary:

{diff}

Cover:
1. **Summary**: what changed and the apparent purpose
2. **Files & Components**: main files and modules affected
3. **Type of Changes**: features, fixes, refactoring, configuration or docs
4. **Impact**: behaviour, performance, user and developer experience
5. **Technical Details**: notable logic, API, schema or dependency changes
6. **Important Notes**: breaking changes, migrations, testing and deployment concerns

Be thorough yet concise. Focus on what matters for understanding the change."""

LOG_ANALYSIS_TEMPLATE = """\
Analyze the following git log ({timeframe}) and provide insights:

{log}

Cover:
1. **Activity Summary**: development velocity, busy and quiet periods
2. **Key Features & Improvements**: major additions and capabilities
3. **Bug Fixes & Maintenance**: important fixes, performance and security work
4. **Contributors**: active contributors and their focus areas
5. **Patterns**: conventions, testing and release habits
6. **Recommendations**: areas to improve, next steps, technical debt

Be insightful and actionable. Focus on trends rather than listing commits."""

MERGE_CONFLICT_TEMPLATE = """\
Analyze the following merge conflict information and provide resolution guidance:

{conflicts}

Provide:
1. **Conflict Summary**: which files conflict and the likely cause
2. **Resolution Strategy**: the recommended approach
3. **Risk Assessment**: risks of the different approaches
4. **Testing Recommendations**: what to test after resolving
5. **Prevention**: how to avoid similar conflicts

Be practical and actionable."""

MERGE_MESSAGE_TEMPLATE = """\
Generate a merge commit message for merging '{source}' into '{target}'.

Changes being merged:
{changes}

The message should:
1. State clearly what is being merged
2. Summarize the key changes and features
3. Follow the Conventional Commits format where it fits
4. Mention anything notable about the merge

Respond with only the commit message."""

LANGUAGE_DIRECTIVE = (
    "IMPORTANT: Please respond in {language}. All explanations, commit messages, "
    "summaries, and analysis should be written in {language}.\n\n"
)


class PromptAssembler:
    """Builds task prompts from raw git output.

    Every input is budgeted before it is placed into its template. The
    assembler is pure: no network access and no shared state.
    """

    def __init__(self, language_name: Optional[str] = None):
        """Initialize the assembler.

        Args:
            language_name: Display name of the response language, such as
                ``"Korean (한국어)"``. ``None`` means English, which needs no
                directive.
        """
        self.language_name = language_name

    def localize(self, prompt: str) -> str:
        """Prefix ``prompt`` with the response-language directive, if any."""
        if not self.language_name:
            return prompt
        return LANGUAGE_DIRECTIVE.format(language=self.language_name) + prompt

    def stage_decision(self, path: str, content: str) -> str:
        """Prompt for a YES/NO recommendation on staging one file.

        Not localized: the reply is parsed for the literal YES/NO prefixes.
        """
        if len(content) > STAGE_DECISION_MAX_CHARS:
            content = content[:STAGE_DECISION_MAX_CHARS] + "\n... [truncated]"
        return STAGE_DECISION_TEMPLATE.format(path=path, content=content)

    def commit_sections(
        self, diff: str, branch: str, recent_commits: str, file_list: str
    ) -> Sequence[PromptSection]:
        return (
            PromptSection.from_text(COMMIT_DIFF, diff, COMMIT_WEIGHTS[COMMIT_DIFF]),
            PromptSection.from_text(COMMIT_BRANCH, branch),
            PromptSection.from_text(COMMIT_RECENT, recent_commits, COMMIT_WEIGHTS[COMMIT_RECENT]),
            PromptSection.from_text(COMMIT_FILES, file_list, COMMIT_WEIGHTS[COMMIT_FILES]),
        )

    def commit_message(self, diff: str, branch: str, recent_commits: str, file_list: str) -> str:
        """Prompt for a Conventional Commits message from the staged change context."""
        budget = split_budget(self.commit_sections(diff, branch, recent_commits, file_list))
        prompt = COMMIT_MESSAGE_TEMPLATE.format(
            diff=budget[COMMIT_DIFF].text,
            branch=budget[COMMIT_BRANCH].text,
            recent_commits=budget[COMMIT_RECENT].text,
            file_list=budget[COMMIT_FILES].text,
        )
        return self.localize(prompt)

    def diff_summary(self, diff: str) -> str:
        text, _, _ = truncate_content(diff)
        return self.localize(DIFF_SUMMARY_TEMPLATE.format(diff=text))

    def log_analysis(self, log: str, timeframe: str) -> str:
        text, _, _ = truncate_content(log)
        return self.localize(LOG_ANALYSIS_TEMPLATE.format(timeframe=timeframe, log=text))

    def merge_conflict_guidance(self, paths: Sequence[str]) -> str:
        conflicts = "Conflicted files:\n" + "\n".join(f"- {path}" for path in paths)
        text, _, _ = truncate_content(conflicts)
        return self.localize(MERGE_CONFLICT_TEMPLATE.format(conflicts=text))

    def merge_message(self, source: str, target: str, changes: str) -> str:
        text, _, _ = truncate_content(changes)
        return self.localize(
            MERGE_MESSAGE_TEMPLATE.format(source=source, target=target, changes=text)
        )


def parse_stage_decision(reply: str) -> tuple[bool, str]:
    """Interpret a stage-decision reply.

    Returns:
        Tuple of (should_add, reason). Anything other than a YES/NO answer
        is treated as "do not add".
    """
    reply = reply.strip()
    for prefix, decision in (("YES:", True), ("NO:", False)):
        if reply.upper().startswith(prefix):
            reason = reply[len(prefix):].strip()
            # Some models repeat the verdict inside the reason.
            if reason.upper().startswith(prefix):
                reason = reason[len(prefix):].strip()
            return decision, reason
    return False, UNCLEAR_DECISION
