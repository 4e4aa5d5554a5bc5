from config import AppConfig, DEFAULT_DAYS


def test_defaults():
    config = AppConfig()

    assert config.form.days == DEFAULT_DAYS
    assert config.form.periods_per_day == 6
    assert config.form.subject_names[0] == "Mathematics"
    assert config.debug is False


def test_subject_count_is_clamped():
    form = AppConfig().form

    assert form.clamp_subject_count(0) == 1
    assert form.clamp_subject_count(40) == 12
    assert form.clamp_subject_count(7) == 7


def test_load_yaml(tmp_path):
    path = tmp_path / "planner.yaml"
    path.write_text(
        "debug: true\n"
        "state_file: saved/state.json\n"
        "form:\n"
        "  periods_per_day: 8\n"
        "  days: [Monday, Wednesday]\n"
        "api:\n"
        "  port: 9000\n"
    )

    config = AppConfig.load(path)

    assert config.debug is True
    assert config.state_file == "saved/state.json"
    assert config.form.periods_per_day == 8
    assert config.form.days == ["Monday", "Wednesday"]
    assert config.form.section_count == 1
    assert config.api.port == 9000
    assert config.api.host == "127.0.0.1"


def test_extra_subjects_are_cut_and_counted():
    form = AppConfig().form

    kept, dropped = form.limit_subjects(list(range(15)))
    assert kept == list(range(12))
    assert dropped == 3
    assert form.limit_subjects([1, 2]) == ([1, 2], 0)
