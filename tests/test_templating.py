"""
Tests for coordinate template rendering.
"""

import pytest

from config_provider.config import ProviderSettings
from config_provider.errors import TemplateError
from config_provider.models import EventContext, PipelineInfo, RepoInfo
from config_provider.templating import TemplateResolver, translate_legacy


def _data(repo=None, pipeline=None):
    return EventContext(repo=repo or RepoInfo(), pipeline=pipeline or PipelineInfo()).template_data()


class TestRender:
    """Tests for TemplateResolver.render."""

    @pytest.mark.parametrize(
        "template,repo,pipeline,expected",
        [
            ("{{ repo.name }}", RepoInfo(name="myrepo"), None, "myrepo"),
            ("{{ repo.owner }}", RepoInfo(owner="admin"), None, "admin"),
            ("{{ pipeline.branch }}", None, PipelineInfo(branch="main"), "main"),
            ("{{ repo.full_name }}", RepoInfo(full_name="admin/myrepo"), None, "admin/myrepo"),
            ("dronefiles", None, None, "dronefiles"),
            (
                "configs/{{ repo.owner }}/{{ repo.name }}",
                RepoInfo(owner="team", name="backend"),
                None,
                "configs/team/backend",
            ),
            ("{{owner}}", RepoInfo(owner="admin"), None, "admin"),
            ("{{namespace}}", RepoInfo(owner="admin"), None, "admin"),
            ("{{branch}}", None, PipelineInfo(branch="develop"), "develop"),
            ("{{ commit }}", None, PipelineInfo(commit="abc123"), "abc123"),
        ],
    )
    def test_render(self, template, repo, pipeline, expected):
        assert TemplateResolver().render(template, _data(repo, pipeline)) == expected

    def test_render_is_deterministic(self):
        resolver = TemplateResolver()
        data = _data(RepoInfo(name="myapp"), PipelineInfo(branch="main"))
        first = resolver.render("{{ repo.name }}/{{ branch }}", data)
        assert all(resolver.render("{{ repo.name }}/{{ branch }}", data) == first for _ in range(5))

    def test_unknown_top_level_field_fails(self):
        with pytest.raises(TemplateError):
            TemplateResolver().render("{{ organization }}", _data())

    def test_unknown_nested_field_fails(self):
        with pytest.raises(TemplateError):
            TemplateResolver().render("{{ repo.organization }}", _data())

    def test_parse_error_fails(self):
        with pytest.raises(TemplateError) as excinfo:
            TemplateResolver().render("{{ repo.name ", _data())
        assert excinfo.value.template == "{{ repo.name "

    def test_empty_field_value_is_not_an_error(self):
        assert TemplateResolver().render("{{ repo.clone_url }}", _data()) == ""

    def test_evaluation_error_fails(self):
        with pytest.raises(TemplateError) as excinfo:
            TemplateResolver().render("{{ 1 // 0 }}", _data())
        assert isinstance(excinfo.value.__cause__, ZeroDivisionError)

    def test_type_error_fails(self):
        with pytest.raises(TemplateError):
            TemplateResolver().render("{{ repo.name - 1 }}", _data(RepoInfo(name="myapp")))

    @pytest.mark.parametrize("template", ["{{ repo.items }}", "{{ repo.keys }}", "{{ pipeline.get }}"])
    def test_mapping_methods_are_not_fields(self, template):
        with pytest.raises(TemplateError):
            TemplateResolver().render(template, _data())

    def test_subscript_lookup(self):
        assert TemplateResolver().render("{{ repo['name'] }}", _data(RepoInfo(name="myapp"))) == "myapp"

    def test_sandbox_blocks_attribute_escape(self):
        with pytest.raises(TemplateError):
            TemplateResolver().render("{{ repo.__class__.__mro__ }}", _data())


class TestLegacyTemplates:
    """Go-template references from Drone/Woodpecker setups."""

    @pytest.mark.parametrize(
        "template,expected",
        [
            ("{{ .Repo.Owner }}", "{{ repo.owner }}"),
            ("{{ .Repo.Name }}/{{ .Pipeline.Branch }}", "{{ repo.name }}/{{ pipeline.branch }}"),
            ("{{.Repo.FullName}}", "{{repo.full_name}}"),
            ("{{ .Repo.Branch }}", "{{ repo.default_branch }}"),
            ("static-repo", "static-repo"),
            ("{{ repo.name }}", "{{ repo.name }}"),
        ],
    )
    def test_translate(self, template, expected):
        assert translate_legacy(template) == expected

    def test_legacy_render(self):
        data = _data(RepoInfo(name="api-service", owner="backend-team"), PipelineInfo(branch="feature/auth"))
        resolver = TemplateResolver()
        assert resolver.render("{{ .Repo.Name }}-ci", data) == "api-service-ci"
        assert resolver.render("configs/{{ .Pipeline.Branch }}", data) == "configs/feature/auth"

    def test_unknown_legacy_field_fails(self):
        with pytest.raises(TemplateError):
            TemplateResolver().render("{{ .Repo.Organization }}", _data())


class TestResolve:
    """Tests for rendering all four coordinates."""

    def test_scenario(self):
        settings = ProviderSettings(
            namespace_template="{{owner}}",
            repo_name_template="static-repo",
            branch_template="{{branch}}",
            path_template="{{repo.name}}/{{branch}}",
        )
        event = EventContext(repo=RepoInfo(name="myapp", owner="admin"), pipeline=PipelineInfo(branch="main"))

        coordinates = TemplateResolver().resolve(settings, event)

        assert (coordinates.namespace, coordinates.repo, coordinates.branch, coordinates.path) == (
            "admin",
            "static-repo",
            "main",
            "myapp/main",
        )

    def test_defaults(self, event):
        coordinates = TemplateResolver().resolve(ProviderSettings(), event)
        assert coordinates.namespace == "admin"
        assert coordinates.repo == "woodpeckerfiles"
        assert coordinates.branch == "main"
        assert coordinates.path == "myapp/main"

    def test_multi_tenant_setup(self):
        settings = ProviderSettings(
            namespace_template="{{ .Repo.Owner }}",
            repo_name_template="ci-configs",
            branch_template="master",
            path_template="pipelines/{{ .Repo.Name }}",
        )
        event = EventContext(repo=RepoInfo(name="frontend", owner="team-alpha"), pipeline=PipelineInfo(branch="develop"))

        coordinates = TemplateResolver().resolve(settings, event)

        assert coordinates.namespace == "team-alpha"
        assert coordinates.branch == "master"
        assert coordinates.path == "pipelines/frontend"

    def test_any_failing_slot_aborts(self, event):
        settings = ProviderSettings(path_template="{{ pipeline.tag }}")
        with pytest.raises(TemplateError):
            TemplateResolver().resolve(settings, event)
