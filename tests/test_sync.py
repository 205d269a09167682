"""Tests for skill reconciliation."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

from skill_deployer.adapters import AdapterSet, get_adapter
from skill_deployer.manager import DeploymentManager
from skill_deployer.platforms import PlatformDescriptor, PlatformRegistry
from skill_deployer.skill import SkillStore
from skill_deployer.types import SyncState


class TestSyncToAll:
    """Tests for DeploymentManager.sync_to_all."""

    def test_repairs_missing(self, manager: DeploymentManager, demo_skill: Path, tmp_path: Path) -> None:
        """Missing deployments are created."""
        result = manager.sync_to_all("demo")

        assert result.states == {"alpha": SyncState.REPAIRED, "beta": SyncState.REPAIRED}
        assert sorted(result.needs_sync) == ["alpha", "beta"]
        assert sorted(result.repaired) == ["alpha", "beta"]
        assert (tmp_path / "targets" / "alpha" / "skills" / "demo").is_symlink()

    def test_valid_left_alone(self, manager: DeploymentManager, demo_skill: Path) -> None:
        manager.deploy_to_all("demo")

        result = manager.sync_to_all("demo")

        assert result.states == {"alpha": SyncState.VALID, "beta": SyncState.VALID}
        assert result.needs_sync == []
        assert result.applied == {}

    def test_repairs_drift(
        self, manager: DeploymentManager, demo_skill: Path, tmp_path: Path
    ) -> None:
        """A stale link and an outdated conversion are both repaired."""
        manager.deploy_to_all("demo")
        link = tmp_path / "targets" / "alpha" / "skills" / "demo"
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        link.unlink()
        link.symlink_to(elsewhere)
        manifest = demo_skill / "SKILL.md"
        manifest.write_text(manifest.read_text() + "\nUpdated.\n")

        result = manager.sync_to_all("demo")

        assert result.states == {"alpha": SyncState.REPAIRED, "beta": SyncState.REPAIRED}
        assert link.resolve() == demo_skill.resolve()
        assert "Updated." in (tmp_path / "targets" / "beta" / "rules" / "demo.md").read_text()
        assert manager.sync_to_all("demo").needs_sync == []

    def test_dry_run_writes_nothing(self, manager: DeploymentManager, demo_skill: Path, tmp_path: Path) -> None:
        """Dry run reports drift without touching the filesystem."""
        result = manager.sync_to_all("demo", dry_run=True)

        assert result.dry_run is True
        assert result.states == {"alpha": SyncState.DRIFTED, "beta": SyncState.DRIFTED}
        assert result.applied == {}
        assert not (tmp_path / "targets").exists()

    def test_dry_run_leaves_drift_untouched(
        self, manager: DeploymentManager, demo_skill: Path, tmp_path: Path
    ) -> None:
        """Dry run on a stale link and an outdated file changes neither."""
        manager.deploy_to_all("demo")
        link = tmp_path / "targets" / "alpha" / "skills" / "demo"
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        link.unlink()
        link.symlink_to(elsewhere)
        manifest = demo_skill / "SKILL.md"
        manifest.write_text(manifest.read_text() + "\nUpdated.\n")
        rules_file = tmp_path / "targets" / "beta" / "rules" / "demo.md"
        content_before = rules_file.read_text()

        def statuses() -> dict:
            return {
                p.name: get_adapter(p, manager.adapters).is_deployed("demo", p)
                for p in manager.target_platforms()
            }

        before = statuses()

        result = manager.sync_to_all("demo", dry_run=True)

        assert result.states == {"alpha": SyncState.DRIFTED, "beta": SyncState.DRIFTED}
        assert result.observed == before
        assert statuses() == before
        assert all(status.deployed and not status.valid for status in before.values())
        assert os.readlink(link) == str(elsewhere)
        assert rules_file.read_text() == content_before
        assert result.applied == {}

    def test_repair_failure(
        self, registry: PlatformRegistry, store: SkillStore, adapters: AdapterSet, demo_skill: Path
    ) -> None:
        """A repair that fails is recorded without stopping the others."""
        link = MagicMock()
        link.is_deployed.return_value = MagicMock(deployed=False, valid=False)
        link.deploy.side_effect = PermissionError("read-only")
        manager = DeploymentManager(
            registry=registry, store=store, adapters=AdapterSet(link=link, convert=adapters.convert)
        )

        result = manager.sync_to_all("demo")

        assert result.states["alpha"] is SyncState.REPAIR_FAILED
        assert "read-only" in result.errors["alpha"]
        assert result.states["beta"] is SyncState.REPAIRED
        assert result.failed == ["alpha"]

    def test_check_error(
        self, registry: PlatformRegistry, store: SkillStore, adapters: AdapterSet, demo_skill: Path
    ) -> None:
        """A status check that raises puts the platform in the error state."""
        link = MagicMock()
        link.is_deployed.side_effect = OSError("unreadable")
        manager = DeploymentManager(
            registry=registry, store=store, adapters=AdapterSet(link=link, convert=adapters.convert)
        )

        result = manager.sync_to_all("demo")

        assert result.states["alpha"] is SyncState.ERROR
        assert "alpha" not in result.observed
        link.deploy.assert_not_called()
        assert result.states["beta"] is SyncState.REPAIRED

    def test_missing_source(self, manager: DeploymentManager, tmp_path: Path) -> None:
        """Sync does nothing when the source is missing."""
        result = manager.sync_to_all("demo")

        assert result.error is not None
        assert result.states == {}
        assert not (tmp_path / "targets").exists()


def test_sync_all_skills(manager: DeploymentManager, demo_skill: Path, skills_root: Path, tmp_path: Path) -> None:
    """Every skill in the store is reconciled."""
    other = skills_root / "other"
    other.mkdir()
    (other / "SKILL.md").write_text("---\nname: other\ndescription: Another skill\n---\nBody\n")

    results = manager.sync_all_skills()

    assert [r.skill_name for r in results] == ["demo", "other"]
    assert all(r.failed == [] for r in results)
    assert os.path.islink(tmp_path / "targets" / "alpha" / "skills" / "other")


class TestScopeWithoutDirectory:
    """Platforms with no directory for the requested scope."""

    def test_not_applicable_at_global_scope(
        self,
        link_platform: PlatformDescriptor,
        mdc_platform: PlatformDescriptor,
        store: SkillStore,
        adapters: AdapterSet,
        demo_skill: Path,
    ) -> None:
        """A project-only platform is neither repaired nor reported as drifted."""
        registry = PlatformRegistry([link_platform, mdc_platform])
        manager = DeploymentManager(registry=registry, store=store, adapters=adapters)

        first = manager.sync_to_all("demo")
        second = manager.sync_to_all("demo")
        dry = manager.sync_to_all("demo", dry_run=True)

        assert first.states["delta"] is SyncState.NOT_APPLICABLE
        assert "delta" not in first.applied
        assert second.states == {"alpha": SyncState.VALID, "delta": SyncState.NOT_APPLICABLE}
        assert dry.states["delta"] is SyncState.NOT_APPLICABLE
        assert "delta" not in dry.needs_sync
        assert first.failed == []

    def test_project_scope_still_synced(
        self,
        mdc_platform: PlatformDescriptor,
        store: SkillStore,
        adapters: AdapterSet,
        demo_skill: Path,
        tmp_path: Path,
    ) -> None:
        """With a project root the same platform is repaired normally."""
        manager = DeploymentManager(
            registry=PlatformRegistry([mdc_platform]), store=store, adapters=adapters
        )
        project = tmp_path / "proj"

        result = manager.sync_to_all("demo", project_root=project)

        assert result.states == {"delta": SyncState.REPAIRED}
        assert (project / ".delta" / "rules" / "demo.mdc").is_file()
        assert manager.sync_to_all("demo", project_root=project).states == {"delta": SyncState.VALID}
