# tests/plugin/test_directives.py

"""Tests for reading maven_it / maven_test markers from pytest items."""

import pytest

from mavenit.directives import identity_for, read_directives
from mavenit.exceptions import ConfigurationError
from mavenit.models import CacheMode

SOURCE = """
import pytest

pytestmark = pytest.mark.maven_it("clean", "install")

@pytest.mark.maven_it(goals=["clean", "verify"], cache="shared", options=["-ntp"], profiles=["suite", "shared"])
class TestSuite:

    @pytest.mark.maven_test
    def test_defaults(self):
        pass

    @pytest.mark.maven_test("package", profiles=["a", "b"], debug=True, timeout=30)
    def test_custom(self):
        pass

    @pytest.mark.parametrize("jdk", ["17", "21"])
    @pytest.mark.maven_test
    def test_param(self, jdk):
        pass

    def test_plain(self):
        pass

@pytest.mark.maven_test
def test_module_level():
    pass
"""


@pytest.fixture
def items(pytester: pytest.Pytester) -> dict:
    return {item.name: item for item in pytester.getitems(SOURCE)}


def test_class_directives(items: dict) -> None:
    directives = read_directives(items["test_defaults"])

    assert directives.suite.goals == ("clean", "verify")
    assert directives.suite.cache_mode is CacheMode.SHARED
    assert directives.suite.options == ("-ntp",)
    assert directives.suite.profiles == ("suite", "shared")
    assert directives.case.goals == ()
    assert directives.case.debug is False


def test_method_directives(items: dict) -> None:
    directives = read_directives(items["test_custom"])

    assert directives.case.goals == ("package",)
    assert directives.case.profiles == ("a", "b")
    assert directives.suite.profiles == ("suite", "shared")
    assert directives.case.debug is True
    assert directives.case.timeout == 30


def test_module_marker_used_for_functions(items: dict) -> None:
    directives = read_directives(items["test_module_level"])

    assert directives.suite.goals == ("clean", "install")
    assert directives.suite.profiles == ()
    assert directives.suite.cache_mode is CacheMode.PER_CASE


def test_unmarked_test_is_not_a_unit(items: dict) -> None:
    assert read_directives(items["test_plain"]) is None


def test_identity(items: dict) -> None:
    module_name = items["test_defaults"].module.__name__

    assert identity_for(items["test_defaults"]).suite == f"{module_name}.TestSuite"
    assert identity_for(items["test_defaults"]).case == "test_defaults"
    assert identity_for(items["test_module_level"]).suite == module_name


def test_parametrized_identity(items: dict) -> None:
    identity = identity_for(items["test_param[17]"])

    assert identity.case == "test_param[17]"
    assert identity.fixture_name == "test_param"
    assert identity.case_dir_name.startswith("test_param_17_-")
    assert identity.case_dir_name != identity_for(items["test_param[21]"]).case_dir_name


def test_unknown_marker_argument(pytester: pytest.Pytester) -> None:
    item = pytester.getitem(
        "import pytest\n@pytest.mark.maven_test('verify', profile='typo')\ndef test_func():\n    pass\n"
    )

    with pytest.raises(ConfigurationError, match="profile"):
        read_directives(item)


def test_bad_cache_mode(pytester: pytest.Pytester) -> None:
    item = pytester.getitem(
        "import pytest\n"
        "@pytest.mark.maven_it('verify', cache='global')\n"
        "@pytest.mark.maven_test\n"
        "def test_func():\n    pass\n"
    )

    with pytest.raises(ConfigurationError, match="cache mode"):
        read_directives(item)


def test_goals_given_twice(pytester: pytest.Pytester) -> None:
    item = pytester.getitem(
        "import pytest\n@pytest.mark.maven_test('verify', goals=['package'])\ndef test_func():\n    pass\n"
    )

    with pytest.raises(ConfigurationError, match="not both"):
        read_directives(item)


@pytest.mark.parametrize("timeout", ["0", "-5"])
def test_non_positive_timeout(pytester: pytest.Pytester, timeout: str) -> None:
    item = pytester.getitem(
        f"import pytest\n@pytest.mark.maven_test('verify', timeout={timeout})\ndef test_func():\n    pass\n"
    )

    with pytest.raises(ConfigurationError, match="positive number of seconds"):
        read_directives(item)
