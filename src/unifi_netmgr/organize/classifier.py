"""Device classifier: the prioritised rule cascade."""

from dataclasses import dataclass
from typing import Iterable
from unifi_netmgr.models.local import ClientRecord
from unifi_netmgr.organize.rules import ClassificationRule, RuleTier, default_rules
from unifi_netmgr.organize.scheme import CategoryScheme
from unifi_netmgr.utils.errors import ErrorCodes, ToolError


@dataclass(frozen=True)
class Classification:
    """Category chosen for a client and the rule that chose it."""

    category: str
    priority: int
    tier: RuleTier
    rule: str


class DeviceClassifier:
    """Assign clients to categories using a tiered rule table.

    Rules are evaluated strongest first: metadata tier, then name tier, then
    MAC tier, and by descending priority inside a tier. Rules with the same
    tier and priority keep their table order. The first match wins.
    """

    def __init__(
        self,
        rules: Iterable[ClassificationRule] | None = None,
        scheme: CategoryScheme | None = None,
    ):
        """Initialize the classifier.

        Args:
            rules: Rule table (defaults to the built-in table)
            scheme: When given, every rule must target an assignable category of it

        Raises:
            ToolError: CATEGORY_NOT_FOUND when a rule targets a category the scheme lacks
        """
        rules = list(rules) if rules is not None else default_rules()

        if scheme is not None:
            for rule in rules:
                if rule.category not in scheme:
                    raise ToolError(
                        message=f'Rule {rule.name} targets unknown category {rule.category}',
                        error_code=ErrorCodes.CATEGORY_NOT_FOUND,
                        suggestion=f'Known categories: {", ".join(scheme.names)}',
                    )
                if not scheme.get(rule.category).assignable:
                    raise ToolError(
                        message=f'Rule {rule.name} targets reserved pool {rule.category}',
                        error_code=ErrorCodes.CONFIG_INVALID,
                    )

        # sorted() is stable, so equal (tier, priority) keep table order
        self._rules = sorted(rules, key=lambda r: (r.tier.rank, r.priority), reverse=True)

    @property
    def rules(self) -> list[ClassificationRule]:
        """Rules in evaluation order."""
        return list(self._rules)

    def classify(self, client: ClientRecord) -> Classification | None:
        """Return the category of the first matching rule, or None if no rule matches."""
        name = (client.name or client.hostname or '').lower()
        mac = client.mac.lower()

        for rule in self._rules:
            if rule.matches(name, mac, client.metadata):
                return Classification(
                    category=rule.category,
                    priority=rule.priority,
                    tier=rule.tier,
                    rule=rule.name,
                )
        return None
