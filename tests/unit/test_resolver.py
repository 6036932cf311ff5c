"""Unit tests for CommandResolver — lookup, placeholder substitution, cwd."""

from __future__ import annotations

import os

import pytest

from githook.core.errors import EmptyScript, ResolutionError, UnknownRepository
from githook.core.resolver import DIR_PLACEHOLDER, CommandResolver, resolve
from githook.models.hook_config import JobDefinition


class TestResolve:
    def test_resolves_executable_and_arguments(self):
        registry = {"repo1": JobDefinition(dir="/srv/repo1", script=["make", "-j4", "all"])}
        spec = resolve(registry, "repo1")

        assert spec.executable == "make"
        assert spec.arguments == ["-j4", "all"]
        assert spec.working_directory == "/srv/repo1"
        assert spec.argv == ["make", "-j4", "all"]

    def test_placeholder_in_executable_is_substituted(self):
        registry = {"r": JobDefinition(dir="/srv/r", script=["$dir/build.sh"])}
        assert resolve(registry, "r").executable == "/srv/r/build.sh"

    def test_only_first_placeholder_is_substituted(self):
        registry = {"r": JobDefinition(dir="/d", script=["run-$dir-$dir", "x"])}
        spec = resolve(registry, "r")

        assert spec.executable == "run-/d-$dir"
        assert spec.arguments == ["x"]

    def test_placeholder_in_arguments_is_left_alone(self):
        registry = {"repo1": JobDefinition(dir="/tmp", script=["/bin/echo", "$dir", "hi"])}
        spec = resolve(registry, "repo1")

        assert spec.executable == "/bin/echo"
        assert spec.arguments == [DIR_PLACEHOLDER, "hi"]

    def test_single_token_script_has_no_arguments(self):
        spec = resolve({"r": JobDefinition(dir="/x", script=["./ci"])}, "r")
        assert spec.arguments == []

    def test_empty_dir_uses_current_directory(self):
        spec = resolve({"r": JobDefinition(script=["$dir/ci"])}, "r")

        assert spec.working_directory == os.getcwd()
        assert spec.executable == "/ci"

    def test_unknown_repository(self):
        with pytest.raises(UnknownRepository, match="ghost"):
            resolve({"repo1": JobDefinition(script=["true"])}, "ghost")

    def test_empty_script(self):
        with pytest.raises(EmptyScript, match="repo1"):
            resolve({"repo1": JobDefinition(dir="/x", script=[])}, "repo1")

    @pytest.mark.parametrize(
        ("registry", "name", "ok"),
        [
            ({}, "a", False),
            ({"a": JobDefinition(script=[])}, "a", False),
            ({"a": JobDefinition(script=["x"])}, "a", True),
            ({"a": JobDefinition(script=["x"])}, "b", False),
            ({"a": JobDefinition(script=["x"]), "b": JobDefinition(script=["y", "z"])}, "b", True),
        ],
    )
    def test_succeeds_iff_known_with_script(self, registry, name, ok):
        if ok:
            assert resolve(registry, name).executable
        else:
            with pytest.raises(ResolutionError):
                resolve(registry, name)

    def test_resolver_object_delegates(self):
        registry = {"r": JobDefinition(dir="/d", script=["a", "b"])}
        assert CommandResolver().resolve(registry, "r") == resolve(registry, "r")
