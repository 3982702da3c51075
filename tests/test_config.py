from finance_tracker import config


def test_ensure_data_directories_creates_only_data_dir(monkeypatch, tmp_path):
    data_dir = tmp_path / 'data'
    monkeypatch.setattr(config, 'DATA_DIR', data_dir)

    config.ensure_data_directories()
    config.ensure_data_directories()

    assert data_dir.is_dir()
    assert list(data_dir.iterdir()) == []
    assert not hasattr(config, 'REPORTS_DIR')
    assert not hasattr(config, 'get_db_path')
