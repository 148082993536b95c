import datetime as dt
import json

import pytest

from meshstep.config import DEFAULT_SCHEMA, ExportOptions
from meshstep.errors import ConfigError


def test_defaults():
    options = ExportOptions()
    assert options.file_name == 'model.step'
    assert options.schema == DEFAULT_SCHEMA
    assert options.length_unit == 'MILLI'
    assert options.timestamp is None
    assert options.resolved_timestamp().tzinfo is not None


def test_load_yaml(tmp_path):
    path = tmp_path / 'export.yaml'
    path.write_text(
        "name: bracket\n"
        "author: Ada\n"
        "length_unit: CENTI\n"
        "uncertainty: 1.0e-5\n"
        "timestamp: '2024-01-01T00:00:00'\n",
        encoding='utf-8',
    )
    options = ExportOptions.load(path)
    assert options.name == 'bracket'
    assert options.author == 'Ada'
    assert options.length_unit == 'CENTI'
    assert options.uncertainty == pytest.approx(1e-5)
    assert options.timestamp == dt.datetime(2024, 1, 1)


def test_load_json(tmp_path):
    path = tmp_path / 'export.json'
    path.write_text(json.dumps({'schema': 'AUTOMOTIVE_DESIGN', 'length_unit': None}),
                    encoding='utf-8')
    options = ExportOptions.load(path)
    assert options.schema == 'AUTOMOTIVE_DESIGN'
    assert options.length_unit is None


def test_load_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text('', encoding='utf-8')
    assert ExportOptions.load(path) == ExportOptions()


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ExportOptions.load(tmp_path / 'nope.yaml')


def test_load_rejects_non_mapping(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text('- a\n- b\n', encoding='utf-8')
    with pytest.raises(ConfigError):
        ExportOptions.load(path)


@pytest.mark.parametrize('suffix, text', [
    ('.json', '{not json'),
    ('.yaml', 'name: [unclosed\n'),
])
def test_load_rejects_malformed_documents(tmp_path, suffix, text):
    path = tmp_path / f'broken{suffix}'
    path.write_text(text, encoding='utf-8')
    with pytest.raises(ConfigError, match='broken'):
        ExportOptions.load(path)


def test_load_rejects_wrongly_typed_values(tmp_path):
    path = tmp_path / 'typed.yaml'
    path.write_text("name: 42\n", encoding='utf-8')
    with pytest.raises(ConfigError, match='name'):
        ExportOptions.load(path)


def test_unknown_keys_rejected():
    with pytest.raises(ConfigError, match='colour'):
        ExportOptions.from_mapping({'colour': 'red'})


@pytest.mark.parametrize('data', [
    {'length_unit': 'FURLONG'},
    {'uncertainty': 0},
    {'uncertainty': 'lots'},
    {'timestamp': 'yesterday'},
    {'file_name': ''},
    {'name': 5},
    {'author': ['Ada']},
    {'schema': None},
    {'length_unit': 3},
    {'uncertainty': True},
    {'timestamp': 1700000000},
    {'timestamp': dt.date(2024, 1, 1)},
])
def test_invalid_values_rejected(data):
    with pytest.raises(ConfigError):
        ExportOptions.from_mapping(data)


def test_replace_returns_copy():
    base = ExportOptions()
    changed = base.replace(name='other')
    assert changed.name == 'other'
    assert base.name == 'meshstep_model'


def test_direct_construction_checks_types():
    with pytest.raises(ConfigError):
        ExportOptions(description=None)
    with pytest.raises(ConfigError):
        ExportOptions(uncertainty='1e-6')
