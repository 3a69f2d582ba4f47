"""Unit tests for TrackedTarget."""

import io

import pytest

from transfertrack.config import PUSH_PROMPTS, TrackingSettings
from transfertrack.core.exceptions import ContentExistsError
from transfertrack.core.models import Descriptor


FAST = TrackingSettings(render_interval=0.01)
PAYLOAD = b"hello world"


@pytest.fixture
def manager(surface):
    """A running manager on a recording surface, stopped after the test."""
    from transfertrack.progress import TrackingManager

    manager = TrackingManager(surface, FAST)
    yield manager
    if not manager.stopped:
        manager.stop()


@pytest.fixture
def tracked(memory_target, manager):
    """The in-memory target wrapped for tracking."""
    from transfertrack.progress import wrap

    return wrap(memory_target, manager, PUSH_PROMPTS)


@pytest.mark.progress
@pytest.mark.tra("Progress.Target")
class TestTrackedTargetPush:
    """Tests for tracked pushes."""

    @pytest.mark.tier(1)
    def test_push_stores_content_and_completes_line(
        self, tracked, memory_target, manager, descriptor
    ) -> None:
        """push() forwards the payload and completes one line."""
        tracked.push(descriptor, io.BytesIO(PAYLOAD))
        manager.stop()

        [line] = manager.snapshot()
        assert memory_target.blobs[descriptor.digest] == PAYLOAD
        assert line.done
        assert line.prompt == "Uploaded"
        assert line.transferred == descriptor.size

    def test_rejected_push_is_never_marked_done(
        self, tracked, memory_target, manager, descriptor
    ) -> None:
        """A push of present content re-raises without a completion marker."""
        memory_target.blobs[descriptor.digest] = PAYLOAD

        with pytest.raises(ContentExistsError):
            tracked.push(descriptor, io.BytesIO(PAYLOAD))
        manager.stop()

        [line] = manager.snapshot()
        assert not line.done
        assert line.ended_at is None
        assert line.started_at is not None
        assert not line.render(80)[0].startswith("✓")

    def test_short_stream_keeps_line_in_flight(self, tracked, manager) -> None:
        """A failed push leaves its last progress visible."""
        from transfertrack.core.exceptions import UnexpectedEndOfStreamError

        desc = Descriptor(media_type="text/plain", digest="sha256:" + "2" * 64, size=64)

        with pytest.raises(UnexpectedEndOfStreamError):
            tracked.push(desc, io.BytesIO(PAYLOAD))
        manager.stop()

        [line] = manager.snapshot()
        assert not line.done

    def test_push_reference_falls_back_to_push_and_tag(
        self, tracked, memory_target, manager, descriptor
    ) -> None:
        """Targets without push_reference get a push then a tag."""
        tracked.push_reference(descriptor, io.BytesIO(PAYLOAD), "v1")
        manager.stop()

        assert memory_target.tags == {"v1": descriptor.digest}
        assert len(manager.snapshot()) == 1

    def test_push_reference_uses_native_support(
        self, tmp_path, manager, descriptor
    ) -> None:
        """Targets with push_reference receive a single call."""
        from transfertrack.adapters.storage import FilesystemStore
        from transfertrack.progress import wrap

        store = FilesystemStore(tmp_path)
        wrap(store, manager, PUSH_PROMPTS).push_reference(
            descriptor, io.BytesIO(PAYLOAD), "v1"
        )

        assert store.resolve("v1").digest == descriptor.digest


@pytest.mark.progress
class TestTrackedTargetEvents:
    """Tests for metadata-only events."""

    def test_exists_reports_present_content(
        self, tracked, memory_target, manager, descriptor
    ) -> None:
        """exists() shows a completed Exists line for present content."""
        memory_target.blobs[descriptor.digest] = PAYLOAD

        assert tracked.exists(descriptor)
        manager.stop()

        [line] = manager.snapshot()
        assert line.done
        assert line.prompt == "Exists"
        assert line.percent() == 1.0

    def test_exists_is_silent_for_missing_content(
        self, tracked, manager, descriptor
    ) -> None:
        """exists() adds no line for missing content."""
        assert not tracked.exists(descriptor)
        manager.stop()

        assert manager.snapshot() == []

    def test_tag_reports_reference(
        self, tracked, memory_target, manager, descriptor
    ) -> None:
        """tag() shows the reference next to the tagged prompt."""
        memory_target.blobs[descriptor.digest] = PAYLOAD

        tracked.tag(descriptor, "latest")
        manager.stop()

        [line] = manager.snapshot()
        assert memory_target.tags == {"latest": descriptor.digest}
        assert line.prompt == "Tagged latest"

    def test_mount_reports_mounted(self, manager, memory_target, descriptor) -> None:
        """mount() forwards to mount-capable targets and reports it."""
        from transfertrack.progress import wrap

        calls = []

        class MountingTarget(type(memory_target)):
            def mount(self, descriptor, from_repository, get_content=None):
                calls.append((descriptor, from_repository))

        tracked = wrap(MountingTarget(), manager, PUSH_PROMPTS)
        tracked.mount(descriptor, "library/base")
        manager.stop()

        [line] = manager.snapshot()
        assert calls == [(descriptor, "library/base")]
        assert line.prompt == "Mounted"
        assert line.done

    def test_mount_requires_support(self, tracked, descriptor) -> None:
        """mount() on a target without mount raises TypeError."""
        with pytest.raises(TypeError, match="does not support mount"):
            tracked.mount(descriptor, "library/base")

    def test_zero_byte_content_is_complete(self, tracked, manager) -> None:
        """Reporting empty content renders 100%."""
        desc = Descriptor.from_bytes(b"", "application/json")

        tracked.report(desc, "Skipped")
        manager.stop()

        [line] = manager.snapshot()
        assert line.percent() == 1.0
        assert line.prompt == "Skipped"


@pytest.mark.progress
class TestTrackedTargetForwarding:
    """Tests for transparency of the decorator."""

    def test_satisfies_target_port(self, tracked) -> None:
        """A tracked target is still a TargetPort."""
        from transfertrack.core.ports import TargetPort

        assert isinstance(tracked, TargetPort)

    def test_forwards_unknown_attributes(self, tracked, memory_target) -> None:
        """Attributes not defined by the decorator come from the target."""
        assert tracked.blobs is memory_target.blobs
        assert tracked.target is memory_target
