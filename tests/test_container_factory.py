"""
Container Factory Tests
"""

import pytest

from conftest import FakeMediaElement


@pytest.fixture(autouse=True)
def _reset_config_service():
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    yield
    ConfigService.reset_instance()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "audio:\n"
        "  media_root: /srv/media\n"
        "playback:\n"
        "  default_volume: 0.5\n"
        "  autoplay: true\n",
        encoding="utf-8",
    )
    return str(path)


class TestAppContainerFactory:

    def test_create_wires_services_from_config(self, config_path):
        from app.container_factory import AppContainerFactory
        from models.track import Track

        element = FakeMediaElement()
        container = AppContainerFactory.create(config_path, media_element=element)

        assert container.controller.media_element is element
        assert container.controller.status.volume == 0.5
        assert ("set_volume", 0.5) in element.calls

        container.controller.bind(Track(id="t", url="bg/loop.mp3"))
        assert element.calls[-2][0] == "load"
        assert element.calls[-2][1].replace("\\", "/").endswith("/srv/media/bg/loop.mp3")
        assert element.calls[-1] == ("play",)

        container.cleanup()
        assert container.controller.is_closed
        assert element.cleaned_up

    def test_create_uses_configured_backend(self, config_path, monkeypatch):
        from app.container_factory import AppContainerFactory
        from core.element_factory import MediaElementFactory

        requested = []

        def fake_create(backend="miniaudio"):
            requested.append(backend)
            return FakeMediaElement()

        monkeypatch.setattr(MediaElementFactory, "create", staticmethod(fake_create))

        container = AppContainerFactory.create(config_path)

        assert requested == ["miniaudio"]
        assert container.controller.media_element.get_engine_name() == "fake"
        container.cleanup()
