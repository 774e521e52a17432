#!/usr/bin/env python3
"""Tests for the prototype_gallery CLI commands."""
import json
import sys
from pathlib import Path

import pytest

import prototype_gallery
from conftest import FakePublisher, make_prototype
from publisher import EnvironmentCheckError, PublishError


@pytest.fixture
def dirs(tmp_path, prototypes_root, monkeypatch):
    for env_name in ("GALLERY_PROTOTYPES_DIR", "GALLERY_OUTPUT_DIR", "GALLERY_CACHE_FILE"):
        monkeypatch.delenv(env_name, raising=False)
    gallery = tmp_path / "gallery"
    return prototypes_root, gallery


@pytest.fixture
def publisher(monkeypatch):
    fake = FakePublisher()
    monkeypatch.setattr(prototype_gallery, "make_publisher", lambda: fake)
    return fake


def run_cli(dirs, *args):
    root, gallery = dirs
    argv = ["prototype_gallery.py", "--prototypes-dir", str(root), "--gallery-dir", str(gallery), *args]
    return prototype_gallery.main(argv)


def test_no_command_shows_usage_and_exits(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["prototype_gallery.py"])
    with pytest.raises(SystemExit) as e:
        prototype_gallery.main()
    assert e.value.code == 2
    assert "usage:" in capsys.readouterr().err.lower()


def test_scan_prints_tree(dirs, capsys):
    make_prototype(dirs[0], "onboarding", "welcome", title="Acme - Welcome Screen")

    assert run_cli(dirs, "scan") == 0

    out = capsys.readouterr().out
    assert "onboarding" in out
    assert "Welcome (welcome) - Welcome Screen" in out


def test_missing_prototypes_dir_is_fatal(tmp_path, dirs, capsys):
    missing = (tmp_path / "nope", dirs[1])

    assert run_cli(missing, "scan") == 1
    assert "Prototypes directory not found" in capsys.readouterr().out


def test_deploy_all_runs_full_sync(dirs, publisher):
    make_prototype(dirs[0], "onboarding", "welcome")

    assert run_cli(dirs, "deploy-all") == 0

    assert [name for _, name in publisher.calls] == ["prototype-welcome", "prototype-gallery"]
    assert (dirs[1] / "index.html").exists()
    cached = json.loads((dirs[1] / "deployments.json").read_text(encoding="utf-8"))
    assert cached["welcome"]["url"] == "https://prototype-welcome.vercel.app"


def test_deploy_all_without_gallery_publish(dirs, publisher):
    make_prototype(dirs[0], "onboarding", "welcome")

    assert run_cli(dirs, "deploy-all", "--no-gallery-deploy") == 0

    assert [name for _, name in publisher.calls] == ["prototype-welcome"]


def test_setup_failure_stops_before_scanning(dirs, monkeypatch, capsys):
    make_prototype(dirs[0], "onboarding", "welcome")

    class LoggedOut(FakePublisher):
        def check_environment(self):
            raise EnvironmentCheckError("Not logged in to vercel. Run: vercel login")

    fake = LoggedOut()
    monkeypatch.setattr(prototype_gallery, "make_publisher", lambda: fake)

    assert run_cli(dirs, "deploy-all") == 1
    assert fake.calls == []
    assert "vercel login" in capsys.readouterr().out


def test_deploy_single_item_always_publishes(dirs, publisher):
    make_prototype(dirs[0], "onboarding", "welcome")
    make_prototype(dirs[0], "onboarding", "tutorial")

    assert run_cli(dirs, "deploy", "onboarding/welcome") == 0
    assert run_cli(dirs, "deploy", "welcome") == 0

    assert [name for _, name in publisher.calls] == ["prototype-welcome", "prototype-welcome"]


def test_deploy_unknown_item_fails(dirs, publisher, capsys):
    make_prototype(dirs[0], "onboarding", "welcome")

    assert run_cli(dirs, "deploy", "missing") == 1
    assert "not found" in capsys.readouterr().out


def test_deploy_failure_of_named_item_exits_non_zero(dirs, monkeypatch):
    make_prototype(dirs[0], "onboarding", "welcome")
    fake = FakePublisher(failures={"prototype-welcome"})
    monkeypatch.setattr(prototype_gallery, "make_publisher", lambda: fake)

    assert run_cli(dirs, "deploy", "welcome") == 1
    assert not (dirs[1] / "deployments.json").exists()


def test_deploy_without_name_publishes_changed_items_only(dirs, publisher):
    make_prototype(dirs[0], "onboarding", "welcome")

    assert run_cli(dirs, "deploy") == 0
    assert run_cli(dirs, "deploy") == 0

    assert [name for _, name in publisher.calls] == ["prototype-welcome"]


def test_list_and_url(dirs, publisher, capsys):
    make_prototype(dirs[0], "onboarding", "welcome")
    make_prototype(dirs[0], "onboarding", "tutorial")
    run_cli(dirs, "deploy", "welcome")
    capsys.readouterr()

    assert run_cli(dirs, "list") == 0
    out = capsys.readouterr().out
    assert "• onboarding/welcome" in out
    assert "URL: https://prototype-welcome.vercel.app" in out
    assert "Status: Not deployed" in out

    assert run_cli(dirs, "url", "onboarding/welcome") == 0
    assert capsys.readouterr().out.strip() == "https://prototype-welcome.vercel.app"

    assert run_cli(dirs, "url", "tutorial") == 1
    assert "has not been deployed yet" in capsys.readouterr().out


def test_render_rebuilds_gallery_without_publishing(dirs, publisher):
    make_prototype(dirs[0], "onboarding", "welcome")

    assert run_cli(dirs, "render") == 0

    assert publisher.calls == []
    assert "Pending deployment" in (dirs[1] / "index.html").read_text(encoding="utf-8")


def test_quick_copies_and_publishes_html(dirs, publisher, tmp_path):
    loose = tmp_path / "idea.html"
    loose.write_text("<html><head><title>Idea</title></head></html>", encoding="utf-8")

    assert run_cli(dirs, "quick", str(loose)) == 0

    quick_dirs = [p for p in dirs[0].iterdir() if p.name.startswith("quick-")]
    assert len(quick_dirs) == 1
    assert (quick_dirs[0] / "index.html").read_text(encoding="utf-8") == loose.read_text(encoding="utf-8")
    assert publisher.calls == [(quick_dirs[0], f"prototype-{quick_dirs[0].name}")]


def test_quick_without_file_lists_candidates(dirs, publisher, tmp_path, monkeypatch, capsys):
    work = tmp_path / "work"
    work.mkdir()
    (work / "draft.html").write_text("<html></html>", encoding="utf-8")
    monkeypatch.chdir(work)

    assert run_cli(dirs, "quick") == 1
    assert "draft.html" in capsys.readouterr().out
    assert publisher.calls == []


def test_new_scaffolds_prototype(dirs, capsys):
    root = dirs[0]

    assert run_cli(dirs, "new", "onboarding", "Welcome Screen") == 0

    proto = root / "onboarding" / "Welcome Screen"
    assert (proto / "index.html").exists()
    config = json.loads((proto / "vercel.json").read_text(encoding="utf-8"))
    assert config["name"] == "proto-onboarding-welcome-screen"

    assert run_cli(dirs, "new", "onboarding", "Welcome Screen") == 1
    assert "already exists" in capsys.readouterr().out


def test_cache_path_follows_env(dirs, publisher, tmp_path, monkeypatch):
    make_prototype(dirs[0], "onboarding", "welcome")
    cache_file = tmp_path / "state" / "cache.json"
    monkeypatch.setenv("GALLERY_CACHE_FILE", str(cache_file))

    assert run_cli(dirs, "deploy", "welcome") == 0

    assert cache_file.exists()
    assert not (dirs[1] / "deployments.json").exists()


def test_render_does_not_build_a_publisher(dirs, monkeypatch):
    make_prototype(dirs[0], "onboarding", "welcome")

    def no_publisher():
        raise AssertionError("render must not build a publisher")

    monkeypatch.setattr(prototype_gallery, "make_publisher", no_publisher)

    assert run_cli(dirs, "render") == 0
    assert (dirs[1] / "index.html").exists()


def test_verbose_flag_prints_cli_output_on_failure(dirs, monkeypatch, capsys):
    make_prototype(dirs[0], "onboarding", "welcome")

    class Failing(FakePublisher):
        def publish(self, source_dir, name):
            raise PublishError("vercel exited with 1: Error: boom", "Uploading...\nError: boom\n")

    monkeypatch.setattr(prototype_gallery, "make_publisher", Failing)

    assert run_cli(dirs, "--verbose", "deploy", "welcome") == 1
    assert "   | Uploading..." in capsys.readouterr().out
