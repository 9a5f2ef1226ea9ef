"""Smoke test to verify the toolchain works."""


def test_import_course_replay():
    """Verify the course_replay package can be imported."""
    import course_replay

    assert course_replay is not None


def test_subpackages_importable():
    """Verify all subpackages can be imported."""
    import course_replay.course
    import course_replay.overlay.renderer
    import course_replay.playback
    import course_replay.timing
    import course_replay.web.app

    assert course_replay.course is not None
    assert course_replay.timing is not None
    assert course_replay.playback is not None
    assert course_replay.overlay.renderer is not None
    assert course_replay.web.app is not None
