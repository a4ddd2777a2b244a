import pytest

from ledger_classifier.classification.matcher import extract_detail, match
from ledger_classifier.classification.rules import (
    ClassificationRule,
    MatchStrategy,
    RuleSet,
    normalize_description,
)


def _rule(name, pattern, code, priority=0, strategy=MatchStrategy.CONTAINS, active=True):
    return ClassificationRule(
        name=name,
        match_strategy=strategy,
        pattern=pattern,
        target_account_code=code,
        priority=priority,
        active=active,
    )


def test_specific_payee_beats_generic_keyword() -> None:
    rules = RuleSet(
        [
            _rule("Generic Insurance", "INSURANCE", "8800", priority=5),
            _rule("Insurance Chauke Salaries", "INSURANCE CHAUKE", "8100", priority=10),
        ]
    )

    result = match("PAYMENT TO INSURANCE CHAUKE XG SALARIES", rules)

    assert result.matched_account_code == "8100"
    assert result.matched_rule_name == "Insurance Chauke Salaries"
    assert result.is_fallback is False


def test_contains_rule_on_masked_transfer() -> None:
    rules = RuleSet([_rule("Bank Transfers", "IB TRANSFER TO", "1100")])

    result = match("IB TRANSFER TO *****2689327", rules)

    assert result.matched_account_code == "1100"
    assert result.is_fallback is False


def test_unmatched_description_is_flagged_not_raised() -> None:
    rules = RuleSet([_rule("Bank Transfers", "IB TRANSFER TO", "1100")])

    result = match("XYZ UNKNOWN VENDOR 99213", rules)

    assert result.matched_account_code is None
    assert result.matched_rule_name is None
    assert result.is_fallback is True
    assert result.needs_review is True


def test_match_is_deterministic() -> None:
    rules = RuleSet(
        [
            _rule("A", "ACME", "8710", priority=1),
            _rule("B", "SUPPLIES", "9000", priority=1),
            _rule("C", r"ACME\s+SUP", "8700", priority=1, strategy=MatchStrategy.REGEX),
        ]
    )
    first = match("ACME SUPPLIES 123", rules)

    for _ in range(50):
        assert match("ACME SUPPLIES 123", rules) == first


def test_equal_priority_uses_insertion_order() -> None:
    first = _rule("First", "ACME", "8710", priority=3)
    second = _rule("Second", "ACME", "8700", priority=3)

    assert match("ACME", RuleSet([first, second])).matched_rule_name == "First"
    assert match("ACME", RuleSet([second, first])).matched_rule_name == "Second"


def test_higher_priority_wins_regardless_of_order() -> None:
    low = _rule("Low", "ACME", "8710", priority=1)
    high = _rule("High", "ACME", "8700", priority=2)

    assert match("ACME", RuleSet([low, high])).matched_rule_name == "High"
    assert match("ACME", RuleSet([high, low])).matched_rule_name == "High"


def test_inactive_rules_are_skipped() -> None:
    rules = RuleSet(
        [
            _rule("Disabled", "ACME", "8710", priority=10, active=False),
            _rule("Enabled", "ACME", "8700", priority=1),
        ]
    )

    assert match("ACME", rules).matched_rule_name == "Enabled"


def test_match_accepts_plain_iterable() -> None:
    rules = [_rule("Low", "ACME", "8710", priority=1), _rule("High", "ACME", "8700", priority=9)]

    assert match("acme", rules).matched_account_code == "8700"


@pytest.mark.parametrize(
    "strategy,pattern,description,expected",
    [
        (MatchStrategy.CONTAINS, "transfer", "IB TRANSFER TO", True),
        (MatchStrategy.STARTS_WITH, "RTD-", "rtd-not provided for", True),
        (MatchStrategy.STARTS_WITH, "RTD-", "PAYMENT RTD-", False),
        (MatchStrategy.ENDS_WITH, "SALARIES", "PAYMENT XG  salaries  ", True),
        (MatchStrategy.EQUALS, "bank charges", "  BANK   CHARGES ", True),
        (MatchStrategy.EQUALS, "BANK CHARGES", "BANK CHARGES FEE", False),
        (MatchStrategy.REGEX, r"PAYMENT \d+", "IMMEDIATE PAYMENT 224812909 J MAPHOSA", True),
        (MatchStrategy.REGEX, r"^PAYMENT", "IMMEDIATE PAYMENT", False),
    ],
)
def test_match_strategies(strategy, pattern, description, expected) -> None:
    rule = _rule("Rule", pattern, "8100", strategy=strategy)

    assert rule.matches(description) is expected
    assert (match(description, RuleSet([rule])).matched_rule_name == "Rule") is expected


def test_regex_is_search_not_full_match() -> None:
    rule = _rule("Fee", r"FEE", "9600", strategy=MatchStrategy.REGEX)

    assert match("MONTHLY FEE FOR ACCOUNT", RuleSet([rule])).matched_account_code == "9600"


def test_empty_description_is_unmatched() -> None:
    rules = RuleSet([_rule("Any", "A", "8100")])

    assert match("", rules).is_fallback is True
    assert match(None, rules).is_fallback is True


def test_detail_keeps_free_text_after_match() -> None:
    rule = _rule("Immediate Payment", "IMMEDIATE PAYMENT", "8100")

    result = match("IMMEDIATE PAYMENT 224812909 JEFFREY S MAPHOSA", RuleSet([rule]))

    assert result.detail == "JEFFREY S MAPHOSA"


def test_detail_is_none_when_only_references_remain() -> None:
    rule = _rule("Transfers", "IB TRANSFER TO", "1100")

    result = match("IB TRANSFER TO *****2689327", RuleSet([rule]))

    assert result.detail is None


def test_extract_detail_removes_span() -> None:
    normalized = normalize_description("PAYMENT TO INSURANCE CHAUKE XG SALARIES")
    start = normalized.index("INSURANCE CHAUKE")

    assert extract_detail(normalized, (start, start + len("INSURANCE CHAUKE"))) == "PAYMENT TO XG SALARIES"


def test_regex_keeps_literal_whitespace() -> None:
    rule = _rule("Acme", "ACME  LTD", "8710", strategy=MatchStrategy.REGEX)

    assert rule.matches("ACME  LTD") is True
    assert rule.matches("acme  ltd ") is True
    assert rule.matches("ACME LTD") is False
    assert match("ACME  LTD", RuleSet([rule])).matched_account_code == "8710"


def test_regex_detail_uses_raw_description_span() -> None:
    rule = _rule("Acme", r"ACME\s{2}LTD", "8710", strategy=MatchStrategy.REGEX)

    result = match("  ACME  LTD   invoice 4471 northgate ", RuleSet([rule]))

    assert result.matched_rule_name == "Acme"
    assert result.detail == "INVOICE NORTHGATE"
