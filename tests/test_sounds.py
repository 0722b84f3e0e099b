"""Tests for the synthesized sound samples and mixer setup."""

import pytest

pygame = pytest.importorskip("pygame")

from flattenhund.sounds import SAMPLE_RATE, SoundBoard, _pack, build_samples  # noqa: E402


@pytest.fixture
def dummy_audio(monkeypatch):
    """Headless SDL drivers; leaves pygame fully shut down afterwards."""
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    pygame.quit()
    yield
    pygame.quit()


def open_board():
    board = SoundBoard()
    board.init()
    if not board.available:
        pytest.skip("no audio driver available")
    return board


def test_every_cue_has_a_sample():
    samples = build_samples()
    assert set(samples) == {"flap", "score", "hit", "boost", "game_over"}
    for values in samples.values():
        assert values
        assert all(-1.0 <= v <= 1.0 for v in values)


def test_game_over_starts_silent():
    game_over = build_samples()["game_over"]
    assert game_over[:SAMPLE_RATE // 2] == [0.0] * (SAMPLE_RATE // 2)


def test_samples_follow_the_rate():
    assert len(build_samples(44100)["hit"]) == 4410
    assert len(build_samples(22050)["hit"]) == 2205


def test_pack_is_int16_per_channel():
    assert len(_pack([0.0, 1.0, -1.0])) == 3 * 4
    assert len(_pack([0.0, 1.0, -1.0], channels=1)) == 3 * 2


def test_uninitialised_board_is_silent():
    board = SoundBoard()
    board.on_flap()
    board.on_game_over()
    board.quit()
    assert board.available is False


class TestMixerFormat:
    def test_board_opened_before_pygame_init_keeps_its_rate(self, dummy_audio):
        """The startup order used by the entry point."""
        board = open_board()
        pygame.init()

        assert pygame.mixer.get_init()[0] == SAMPLE_RATE
        assert board.rate == SAMPLE_RATE
        assert board.sounds["hit"].get_length() == pytest.approx(0.1, abs=0.002)
        board.quit()

    def test_board_adapts_to_an_already_open_mixer(self, dummy_audio):
        pygame.init()
        board = open_board()

        assert board.rate == pygame.mixer.get_init()[0]
        assert board.sounds["hit"].get_length() == pytest.approx(0.1, abs=0.002)
        assert board.sounds["flap"].get_length() == pytest.approx(0.2, abs=0.002)
        board.quit()
