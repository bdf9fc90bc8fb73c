from scriptalchemist.models import ScriptAnalysis
from scriptalchemist.views import render_analysis, render_step_indicator, save_script, script_filename


def test_step_indicator_marks_phases():
    assert render_step_indicator(0) == "[>] Input  [ ] Analysis  [ ] Topic  [ ] Result"
    assert render_step_indicator(2) == "[x] Input  [x] Analysis  [>] Topic  [ ] Result"


def test_render_analysis_lists_sections(sample_analysis_dict):
    text = render_analysis(ScriptAnalysis.from_dict(sample_analysis_dict))
    assert "Hook strategy:    curiosity gap with numeric claim" in text
    assert "  1. Hook: Opens with the $10,000 result" in text
    assert "  - direct address" in text


def test_render_analysis_handles_empty_lists():
    text = render_analysis(ScriptAnalysis(hook_strategy="h"))
    assert text.count("(none)") == 2


def test_script_file_named_after_topic(tmp_path):
    assert script_filename("learning  to\tcook") == "learning_to_cook_script.md"
    path = save_script("# 대본", "learning to cook", tmp_path / "out")
    assert path.name == "learning_to_cook_script.md"
    assert path.read_text(encoding="utf-8") == "# 대본"


def test_topic_with_separator_saves_inside_out_dir(tmp_path):
    out = tmp_path / "out"
    path = save_script("# s", "before/after", out)
    assert path.name == "before_after_script.md"
    assert path.resolve().parent == out.resolve()


def test_topic_cannot_escape_out_dir(tmp_path):
    out = tmp_path / "a" / "out"
    path = save_script("# s", "../escaped", out)
    assert path.resolve().parent == out.resolve()
    assert not (tmp_path / "a" / "escaped_script.md").exists()
    assert script_filename('a\\b:c*?"<>|d') == "a_b_c_d_script.md"
    assert script_filename("..") == "untitled_script.md"
