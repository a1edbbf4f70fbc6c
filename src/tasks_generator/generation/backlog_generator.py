"""Rule-based backlog generation.

Turns a GeneratorInput into an ordered list of user stories, engineering
tasks and risks. Generation is pure: no I/O, no randomness, no clock reads,
so identical input always yields identical output.
"""

from ..models import BacklogItem, GeneratorInput, TaskCategory, TemplateType
from .input_parser import ParsedInput, parse_input
from .rules import DEFAULT_RULES, RuleEntry, RuleTables


# Shared tail of every user story description
STORY_DESCRIPTION_TAIL = (
    "This enables {role} to interact with the system effectively. "
    "Acceptance criteria should be defined collaboratively with stakeholders."
)

# Appended to every engineering task description
PLATFORM_SUFFIX = " This task is part of the {platform} application architecture."

# (title, description prefix) for the four stories emitted per role.
# The first title is formatted with verb and outcome as well as role.
STORY_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("As a {role}, I want to {verb} {outcome} so that I can achieve my goals", ""),
    ("As a {role}, I want to view my dashboard so that I can track progress", "Dashboard view for {role}. "),
    ("As a {role}, I want to receive notifications so that I stay informed", "Notification system for {role}. "),
    ("As a {role}, I want to manage my profile and preferences", "Profile management for {role}. "),
)


def _platform_name(template_type: TemplateType | str) -> str:
    return template_type.value if isinstance(template_type, TemplateType) else str(template_type)


class BacklogGenerator:
    """Generates backlog items from a project description using rule tables."""

    def __init__(self, rules: RuleTables = DEFAULT_RULES):
        """Initialize the generator.

        Args:
            rules: Rule tables to draw tasks and risks from.
        """
        self.rules = rules

    def generate_user_stories(
        self,
        parsed: ParsedInput,
        spec_id: str,
        start_order: int = 0,
    ) -> list[BacklogItem]:
        """Emit four stories per role, roles outer and story kinds inner.

        Args:
            parsed: Parsed users and goal.
            spec_id: Owning backlog identifier.
            start_order: Sort order of the first emitted story.

        Returns:
            Stories with sequential sort orders.
        """
        stories: list[BacklogItem] = []
        order = start_order

        for role in parsed.roles:
            for title_template, prefix in STORY_TEMPLATES:
                stories.append(BacklogItem(
                    spec_id=spec_id,
                    category=TaskCategory.USER_STORY,
                    title=title_template.format(role=role, verb=parsed.verb, outcome=parsed.outcome),
                    description=prefix.format(role=role) + STORY_DESCRIPTION_TAIL.format(role=role),
                    sort_order=order,
                ))
                order += 1

        return stories

    def generate_engineering_tasks(
        self,
        data: GeneratorInput,
        start_order: int = 0,
    ) -> list[BacklogItem]:
        """Emit base tasks, then the tasks for the input's platform type.

        Args:
            data: Generator input.
            start_order: Sort order of the first emitted task.

        Returns:
            Engineering tasks with sequential sort orders.
        """
        platform = _platform_name(data.template_type)
        entries = self.rules.base_tasks + self.rules.tasks_for(data.template_type)

        return [
            BacklogItem(
                spec_id=data.spec_id,
                category=TaskCategory.ENGINEERING_TASK,
                title=entry.title,
                description=entry.description + PLATFORM_SUFFIX.format(platform=platform),
                sort_order=start_order + offset,
            )
            for offset, entry in enumerate(entries)
        ]

    def generate_risks(
        self,
        data: GeneratorInput,
        start_order: int = 0,
    ) -> list[BacklogItem]:
        """Emit base, constraint-triggered, fallback and platform risks.

        Every matching constraint rule produces one risk. The fallback risk is
        only emitted when no rule matched and the constraints are non-empty.
        The platform risk always comes last.

        Args:
            data: Generator input.
            start_order: Sort order of the first emitted risk.

        Returns:
            Risks with sequential sort orders.
        """
        entries: list[RuleEntry] = list(self.rules.base_risks)

        constraints_lower = data.constraints.lower()
        matched = [
            RuleEntry(rule.title, rule.description)
            for rule in self.rules.constraint_risks
            if rule.matches(constraints_lower)
        ]
        entries.extend(matched)

        if not matched and data.constraints:
            entries.append(self.rules.fallback_risk)

        platform_risk = self.rules.risk_for(data.template_type)
        if platform_risk:
            entries.append(platform_risk)

        return [
            BacklogItem(
                spec_id=data.spec_id,
                category=TaskCategory.RISK,
                title=entry.title,
                description=entry.description,
                sort_order=start_order + offset,
            )
            for offset, entry in enumerate(entries)
        ]

    def generate_all(self, data: GeneratorInput) -> list[BacklogItem]:
        """Generate the full backlog: stories, then engineering tasks, then risks.

        Sort orders cover [0, N) without gaps.

        Args:
            data: Generator input.

        Returns:
            All generated items in sort order.
        """
        parsed = parse_input(data.users, data.goal)

        stories = self.generate_user_stories(parsed, data.spec_id, 0)
        engineering = self.generate_engineering_tasks(data, len(stories))
        risks = self.generate_risks(data, len(stories) + len(engineering))

        return stories + engineering + risks


_default_generator = BacklogGenerator()


def generate_all_tasks(data: GeneratorInput) -> list[BacklogItem]:
    """Generate a backlog using the default rule tables."""
    return _default_generator.generate_all(data)
