import asyncio

from fakes import FakeSource
from problem_portal.core.choice_table import builtin_table, load_fallback_table
from problem_portal.core.choices import ChoiceCache, ChoiceResolver
from problem_portal.core.config import PROBLEM_ENTITY
from problem_portal.core.models import Choice, DataSource
from problem_portal.core.service import ProblemService

CATEGORY_ROWS = [{"value": "hw", "label": "Hardware"}, {"value": "sw", "label": "Software"}]


def _resolver(source, **kwargs):
    return ChoiceResolver(ProblemService(source), **kwargs)


def test_live_choices_are_cached_after_first_call():
    source = FakeSource(choices={(PROBLEM_ENTITY, "category"): CATEGORY_ROWS})
    resolver = _resolver(source)

    first = asyncio.run(resolver.resolve_choices(PROBLEM_ENTITY, "category"))
    second = asyncio.run(resolver.resolve_choices(PROBLEM_ENTITY, "category"))

    assert first == second == [Choice("hw", "Hardware"), Choice("sw", "Software")]
    assert source.calls["fetch_choice_list"] == 1
    assert (PROBLEM_ENTITY, "category") in resolver.cache


def test_empty_remote_list_uses_fallback_and_caches_it():
    source = FakeSource()
    resolver = _resolver(source)

    result = asyncio.run(resolver.resolve(PROBLEM_ENTITY, "priority"))
    assert result.source is DataSource.FALLBACK
    assert [c.value for c in result.data] == ["1", "2", "3", "4", "5"]
    assert result.data[0].label == "1 - Critical"

    again = asyncio.run(resolver.resolve(PROBLEM_ENTITY, "priority"))
    assert again.data == result.data
    assert source.calls["fetch_choice_list"] == 1


def test_remote_failure_uses_fallback():
    source = FakeSource(choices={(PROBLEM_ENTITY, "state"): [{"value": "1", "label": "One"}]})
    source.failing.add("fetch_choice_list")
    resolver = _resolver(source)

    result = asyncio.run(resolver.resolve(PROBLEM_ENTITY, "state"))
    assert result.is_fallback
    assert result.error
    assert [c.label for c in result.data][:2] == ["New", "Assess"]
    assert len(result.data) == 6


def test_unknown_pair_resolves_to_empty_list():
    resolver = _resolver(FakeSource())
    assert asyncio.run(resolver.resolve_choices("incident", "urgency")) == []


def test_convenience_helpers():
    source = FakeSource(choices={(PROBLEM_ENTITY, "category"): CATEGORY_ROWS})
    resolver = _resolver(source)

    async def scenario():
        return (
            await resolver.problem_categories(),
            await resolver.problem_priorities(),
            await resolver.problem_states(),
        )

    categories, priorities, states = asyncio.run(scenario())
    assert [c.value for c in categories] == ["hw", "sw"]
    assert len(priorities) == 5
    assert states[-1] == Choice("107", "Closed")


def test_shared_cache_between_resolvers():
    cache = ChoiceCache()
    source = FakeSource(choices={(PROBLEM_ENTITY, "category"): CATEGORY_ROWS})
    asyncio.run(_resolver(source, cache=cache).resolve_choices(PROBLEM_ENTITY, "category"))
    asyncio.run(_resolver(source, cache=cache).resolve_choices(PROBLEM_ENTITY, "category"))
    assert source.calls["fetch_choice_list"] == 1
    assert len(cache) == 1


def test_custom_fallback_table():
    table = {(PROBLEM_ENTITY, "category"): [Choice("x", "X")]}
    resolver = _resolver(FakeSource(), fallback_table=table)
    assert asyncio.run(resolver.resolve_choices(PROBLEM_ENTITY, "category")) == [Choice("x", "X")]


def test_fallback_table_yaml_overlay(tmp_path):
    (tmp_path / "choices.yaml").write_text(
        "problem:\n  category:\n    - {value: cloud, label: Cloud}\n    - [edge, Edge]\n"
    )
    table = load_fallback_table(tmp_path)
    assert table[(PROBLEM_ENTITY, "category")] == [Choice("cloud", "Cloud"), Choice("edge", "Edge")]
    assert table[(PROBLEM_ENTITY, "state")] == builtin_table()[(PROBLEM_ENTITY, "state")]


def test_fallback_table_broken_yaml(tmp_path):
    (tmp_path / "choices.yaml").write_text("problem: [unclosed\n")
    assert load_fallback_table(tmp_path) == builtin_table()


def test_fallback_table_missing_file(tmp_path):
    assert load_fallback_table(tmp_path) == builtin_table()


def test_failing_priority_lookup_falls_back_once():
    source = FakeSource()
    source.failing.add("fetch_choice_list")
    resolver = _resolver(source)

    first = asyncio.run(resolver.resolve_choices(PROBLEM_ENTITY, "priority"))
    second = asyncio.run(resolver.resolve_choices(PROBLEM_ENTITY, "priority"))

    assert [c.label for c in first] == ["1 - Critical", "2 - High", "3 - Moderate", "4 - Low", "5 - Planning"]
    assert second == first
    assert source.calls["fetch_choice_list"] == 1
