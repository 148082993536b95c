from meshstep.cli import build_parser, main

STL_SQUARE = """solid square
facet normal 0 0 1
 outer loop
  vertex 0 0 0
  vertex 1 0 0
  vertex 1 1 0
 endloop
endfacet
facet normal 0 0 1
 outer loop
  vertex 0 0 0
  vertex 1 1 0
  vertex 0 1 0
 endloop
endfacet
endsolid square
"""


def _write_input(tmp_path):
    path = tmp_path / 'square.stl'
    path.write_text(STL_SQUARE, encoding='ascii')
    return path


def test_parser_defaults(tmp_path):
    args = build_parser().parse_args([str(tmp_path / 'in.stl')])
    assert args.output is None
    assert not args.overwrite


def test_main_writes_model_step(tmp_path, capsys):
    src = _write_input(tmp_path)
    assert main([str(src)]) == 0
    target = tmp_path / 'model.step'
    assert target.exists()
    text = target.read_text(encoding='utf-8')
    assert text.count('ADVANCED_FACE(') == 2
    assert text.count('CARTESIAN_POINT(') == 4
    assert str(target) in capsys.readouterr().out


def test_main_custom_output_and_name(tmp_path):
    src = _write_input(tmp_path)
    out = tmp_path / 'out' / 'square.step'
    assert main([str(src), '-o', str(out), '--name', 'plate', '--schema', 'AUTOMOTIVE_DESIGN']) == 0
    text = out.read_text(encoding='utf-8')
    assert "FILE_NAME('square.step'," in text
    assert "FILE_SCHEMA(('AUTOMOTIVE_DESIGN'));" in text
    assert "PRODUCT('plate','plate','',(" in text


def test_main_config_file(tmp_path):
    src = _write_input(tmp_path)
    config = tmp_path / 'export.yaml'
    config.write_text("name: from_config\nauthor: Ada\n", encoding='utf-8')
    assert main([str(src), '--config', str(config)]) == 0
    text = (tmp_path / 'model.step').read_text(encoding='utf-8')
    assert "('Ada')" in text
    assert "PRODUCT('from_config'" in text


def test_main_refuses_overwrite(tmp_path):
    src = _write_input(tmp_path)
    (tmp_path / 'model.step').write_text('existing', encoding='utf-8')
    assert main([str(src)]) == 1
    assert (tmp_path / 'model.step').read_text(encoding='utf-8') == 'existing'
    assert main([str(src), '--overwrite']) == 0
    assert (tmp_path / 'model.step').read_text(encoding='utf-8').startswith('ISO-10303-21;')


def test_main_missing_input(tmp_path):
    assert main([str(tmp_path / 'missing.stl')]) == 1


def test_main_reports_malformed_config(tmp_path, caplog):
    src = _write_input(tmp_path)
    config = tmp_path / 'export.json'
    config.write_text('{"name": ', encoding='utf-8')
    assert main([str(src), '--config', str(config)]) == 1
    assert 'invalid JSON' in caplog.text
    assert not (tmp_path / 'model.step').exists()


def test_main_reports_wrongly_typed_config(tmp_path):
    src = _write_input(tmp_path)
    config = tmp_path / 'export.yaml'
    config.write_text("author: [Ada, Grace]\n", encoding='utf-8')
    assert main([str(src), '--config', str(config)]) == 1
