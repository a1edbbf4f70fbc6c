"""Rule tables for backlog generation.

The tables are plain immutable data built once at import time. A generator
takes a RuleTables instance so tests and callers can swap in their own.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..models import TemplateType


@dataclass(frozen=True)
class RuleEntry:
    """A title/description pair emitted as one backlog item."""

    title: str
    description: str


@dataclass(frozen=True)
class ConstraintRule:
    """A risk emitted when any keyword appears in the constraints text."""

    keywords: frozenset[str]
    title: str
    description: str

    def matches(self, constraints_lower: str) -> bool:
        """Case-insensitive substring match; expects lower-cased text."""
        return any(kw in constraints_lower for kw in self.keywords)


@dataclass(frozen=True)
class RuleTables:
    """All static rules consulted by the generator."""

    base_tasks: tuple[RuleEntry, ...]
    platform_tasks: Mapping[TemplateType, tuple[RuleEntry, ...]]
    base_risks: tuple[RuleEntry, ...]
    constraint_risks: tuple[ConstraintRule, ...]
    platform_risks: Mapping[TemplateType, RuleEntry]
    fallback_risk: RuleEntry = field(
        default=RuleEntry(
            title="Constraints should be reviewed for hidden technical implications",
            description=(
                "The provided constraints may have technical implications that are not "
                "immediately obvious. Mitigation: conduct a technical review of all constraints."
            ),
        )
    )

    def tasks_for(self, template_type: TemplateType | str) -> tuple[RuleEntry, ...]:
        """Platform tasks for a template type (empty when none are defined)."""
        return self.platform_tasks.get(template_type, ())

    def risk_for(self, template_type: TemplateType | str) -> RuleEntry | None:
        return self.platform_risks.get(template_type)


BASE_TASKS: tuple[RuleEntry, ...] = (
    RuleEntry(
        "Project scaffolding and repository setup",
        "Initialize project structure, configure linting, CI/CD. Estimated complexity: medium.",
    ),
    RuleEntry(
        "Database schema design and migration",
        "Design and implement the data models. Estimated complexity: medium.",
    ),
    RuleEntry(
        "Authentication and authorization system",
        "Implement user auth flows. Estimated complexity: medium.",
    ),
    RuleEntry(
        "API endpoint development",
        "Build REST API for core features. Estimated complexity: medium.",
    ),
    RuleEntry(
        "Input validation and error handling",
        "Add validation layers and error responses. Estimated complexity: medium.",
    ),
    RuleEntry(
        "Testing setup and initial test suite",
        "Configure testing framework, write initial tests. Estimated complexity: medium.",
    ),
)

PLATFORM_TASKS: Mapping[TemplateType, tuple[RuleEntry, ...]] = MappingProxyType({
    TemplateType.WEB: (
        RuleEntry("Responsive UI layout and navigation",
                  "Build responsive layouts that work across screen sizes. Estimated complexity: high."),
        RuleEntry("State management setup (React)",
                  "Configure state management for frontend application. Estimated complexity: high."),
        RuleEntry("Form handling and client-side validation",
                  "Implement forms with proper validation feedback. Estimated complexity: high."),
        RuleEntry("SEO optimization and meta tags",
                  "Add proper meta tags, sitemap, and SEO best practices. Estimated complexity: high."),
        RuleEntry("Browser compatibility testing",
                  "Test and fix issues across major browsers. Estimated complexity: high."),
        RuleEntry("Performance optimization (lazy loading, code splitting)",
                  "Optimize bundle size and load times. Estimated complexity: high."),
    ),
    TemplateType.MOBILE: (
        RuleEntry("Mobile navigation and screen flow",
                  "Implement mobile-native navigation patterns. Estimated complexity: high."),
        RuleEntry("Offline data storage and sync",
                  "Implement local storage with server synchronization. Estimated complexity: high."),
        RuleEntry("Push notification integration",
                  "Set up push notification service and handlers. Estimated complexity: high."),
        RuleEntry("Device permission handling",
                  "Handle camera, location, storage permissions gracefully. Estimated complexity: high."),
        RuleEntry("App store deployment preparation",
                  "Prepare assets, metadata, and builds for app stores. Estimated complexity: high."),
        RuleEntry("Mobile-specific performance optimization",
                  "Optimize for mobile CPU, memory, and battery. Estimated complexity: high."),
    ),
    TemplateType.INTERNAL: (
        RuleEntry("Role-based access control (RBAC)",
                  "Implement granular permissions system. Estimated complexity: high."),
        RuleEntry("Admin dashboard and management views",
                  "Build admin interfaces for system management. Estimated complexity: high."),
        RuleEntry("Audit logging and activity tracking",
                  "Log all user actions for compliance and debugging. Estimated complexity: high."),
        RuleEntry("Bulk operations and data import/export",
                  "Support CSV/Excel import and bulk data operations. Estimated complexity: high."),
        RuleEntry("Internal SSO/LDAP integration",
                  "Integrate with corporate identity providers. Estimated complexity: high."),
        RuleEntry("Reporting and analytics dashboard",
                  "Build data visualization and reporting features. Estimated complexity: high."),
    ),
})

BASE_RISKS: tuple[RuleEntry, ...] = (
    RuleEntry(
        "Unclear requirements may cause scope creep",
        "Requirements should be validated with stakeholders early. "
        "Mitigation: schedule regular requirement review sessions.",
    ),
    RuleEntry(
        "Third-party dependency risks",
        "External libraries may have breaking changes or vulnerabilities. "
        "Mitigation: pin dependency versions and audit regularly.",
    ),
    RuleEntry(
        "Timeline estimation uncertainty",
        "Initial estimates may be inaccurate. Mitigation: plan buffer time and use iterative delivery.",
    ),
)

CONSTRAINT_RISKS: tuple[ConstraintRule, ...] = (
    ConstraintRule(
        frozenset({"offline", "no internet"}),
        "Offline-first architecture adds significant complexity",
        "Offline support requires sync logic, conflict resolution, and local storage. "
        "Mitigation: evaluate offline-first frameworks.",
    ),
    ConstraintRule(
        frozenset({"budget", "cost", "$"}),
        "Budget constraints may limit technology choices and team size",
        "Limited budget affects tooling and staffing decisions. "
        "Mitigation: prioritize MVP features and use open-source tools.",
    ),
    ConstraintRule(
        frozenset({"deadline", "timeline", "urgent", "fast"}),
        "Tight timeline increases risk of technical debt",
        "Rushing delivery leads to shortcuts. Mitigation: identify must-have vs nice-to-have features early.",
    ),
    ConstraintRule(
        frozenset({"security", "compliance", "hipaa", "gdpr"}),
        "Compliance requirements need dedicated security review",
        "Regulatory compliance adds development overhead. Mitigation: involve security team from project start.",
    ),
    ConstraintRule(
        frozenset({"scale", "performance", "high traffic"}),
        "Scalability requirements need load testing and architecture review",
        "High traffic demands careful architecture. "
        "Mitigation: design for horizontal scaling and conduct load tests early.",
    ),
    ConstraintRule(
        frozenset({"legacy", "existing", "migrate"}),
        "Legacy system integration poses compatibility risks",
        "Old systems may have undocumented behavior. "
        "Mitigation: build adapter layers and plan for integration testing.",
    ),
    ConstraintRule(
        frozenset({"team", "hiring", "resource"}),
        "Resource availability may impact delivery schedule",
        "Team capacity affects velocity. Mitigation: cross-train team members and document knowledge.",
    ),
)

PLATFORM_RISKS: Mapping[TemplateType, RuleEntry] = MappingProxyType({
    TemplateType.WEB: RuleEntry(
        "Cross-browser compatibility may require additional testing effort",
        "Different browsers render differently. Mitigation: use automated cross-browser testing tools.",
    ),
    TemplateType.MOBILE: RuleEntry(
        "Device fragmentation increases testing surface area",
        "Many device sizes and OS versions to support. "
        "Mitigation: define a supported device matrix and use device farms.",
    ),
    TemplateType.INTERNAL: RuleEntry(
        "Internal tool adoption depends on user training and change management",
        "Users may resist new tools. Mitigation: involve end users in design and provide training sessions.",
    ),
})


DEFAULT_RULES = RuleTables(
    base_tasks=BASE_TASKS,
    platform_tasks=PLATFORM_TASKS,
    base_risks=BASE_RISKS,
    constraint_risks=CONSTRAINT_RISKS,
    platform_risks=PLATFORM_RISKS,
)
