import json

import pytest

from blakediff.reports import (
    Comparison,
    OutputFormat,
    ReportFormatError,
    compare_reports,
    find_duplicates_in_report,
    format_comparison_csv,
    format_comparison_json,
    format_comparison_text,
    format_duplicates_csv,
    format_duplicates_json,
    format_duplicates_text,
    parse_report_file,
)

EQ = "\U0001f7f0"


@pytest.fixture
def make_report(tmp_path):
    counter = iter(range(1000))

    def _make(content):
        path = tmp_path / f"report{next(counter)}.txt"
        path.write_text(content, encoding="utf-8")
        return path

    return _make


def test_parse_report_file(make_report):
    path = make_report("abc123 /path/to/file1.txt\ndef456 /path/to/file2.txt\n")
    result = parse_report_file(path)
    assert result == {"abc123": "/path/to/file1.txt", "def456": "/path/to/file2.txt"}


def test_parse_report_file_invalid_format(make_report):
    path = make_report("invalid_line_without_space\n")
    with pytest.raises(ReportFormatError, match="Invalid format at line 1"):
        parse_report_file(path)


def test_parse_report_with_spaces_in_path(make_report):
    path = make_report("abc123 /path/to/file with spaces.txt\n")
    assert parse_report_file(path)["abc123"] == "/path/to/file with spaces.txt"


def test_parse_report_crlf_and_later_lines_win(make_report):
    path = make_report("abc /a.txt\r\nabc /b.txt\r\n")
    assert parse_report_file(path) == {"abc": "/b.txt"}


def test_parse_report_error_reports_line_number(make_report):
    path = make_report("abc /a.txt\nbroken\n")
    with pytest.raises(ReportFormatError, match="line 2") as info:
        parse_report_file(path)
    assert "got 'broken'" in str(info.value)


def test_find_duplicates_in_report_no_duplicates(make_report):
    path = make_report("abc123 /path/to/file1.txt\ndef456 /path/to/file2.txt\n")
    assert find_duplicates_in_report(path) == {}


def test_find_duplicates_in_report_with_duplicates(make_report):
    path = make_report(
        "abc123 /path/to/file1.txt\nabc123 /path/to/file2.txt\nabc123 /path/to/file3.txt\n"
    )
    result = find_duplicates_in_report(path)
    assert result == {
        "abc123": {"/path/to/file1.txt", "/path/to/file2.txt", "/path/to/file3.txt"}
    }


def test_find_duplicates_multiple_groups(make_report):
    path = make_report(
        "abc123 /file1.txt\nabc123 /file2.txt\ndef456 /file3.txt\n"
        "def456 /file4.txt\nghi789 /file5.txt\n"
    )
    result = find_duplicates_in_report(path)
    assert len(result) == 2
    assert len(result["abc123"]) == 2
    assert len(result["def456"]) == 2
    assert "ghi789" not in result


def test_find_duplicates_invalid_format(make_report):
    path = make_report("this_line_has_no_space_separator\n")
    with pytest.raises(ReportFormatError, match="Invalid format at line 1"):
        find_duplicates_in_report(path)


def test_compare_files(make_report):
    first = make_report("abc123 /file1.txt\ndef456 /file2.txt\nghi789 /file3.txt\n")
    second = make_report("abc123 /file1_copy.txt\njkl012 /file4.txt\n")
    result = compare_reports(first, second)
    assert len(result.only_in_1) == 2
    assert len(result.only_in_2) == 1
    assert len(result.common) == 1
    assert result == Comparison(
        only_in_1=["/file2.txt", "/file3.txt"],
        only_in_2=["/file4.txt"],
        common=[("/file1.txt", "/file1_copy.txt")],
    )


def test_compare_rejects_directory(tmp_path, make_report):
    report = make_report("abc /a.txt\n")
    with pytest.raises(IsADirectoryError, match="not directories"):
        compare_reports(tmp_path, report)


def test_output_format_values():
    assert OutputFormat("json") is OutputFormat.JSON
    with pytest.raises(ValueError):
        OutputFormat("xml")


def test_format_duplicates_text():
    duplicates = {"h2": {"/z.txt", "/c.txt"}, "h1": {"/b.txt", "/a.txt"}}
    assert format_duplicates_text(duplicates) == (
        f"duplicates : /a.txt {EQ} /b.txt\nduplicates : /c.txt {EQ} /z.txt\n"
    )


def test_format_duplicates_text_empty():
    assert format_duplicates_text({}) == ""


def test_format_duplicates_json():
    duplicates = {"h1": {"/b.txt", "/a.txt"}, "h2": {"/d.txt", "/c.txt"}}
    text = format_duplicates_json(duplicates)
    assert text == (
        "{\n"
        '  "duplicates": [\n'
        '    ["/a.txt", "/b.txt"],\n'
        '    ["/c.txt", "/d.txt"]\n'
        "  ]\n"
        "}\n"
    )
    assert json.loads(text) == {"duplicates": [["/a.txt", "/b.txt"], ["/c.txt", "/d.txt"]]}


def test_format_duplicates_json_escapes():
    text = format_duplicates_json({"h": {'a"b', "c\\d"}})
    assert json.loads(text) == {"duplicates": [['a"b', "c\\d"]]}


def test_format_duplicates_json_empty():
    assert json.loads(format_duplicates_json({})) == {"duplicates": []}


def test_format_duplicates_csv():
    duplicates = {"h1": {"/b,x.txt", '/a"q.txt'}}
    assert format_duplicates_csv(duplicates) == (
        'hash,file1,file2,file3,...\nh1,"/a""q.txt","/b,x.txt"\n'
    )


def test_format_comparison_text():
    comparison = Comparison(["/a.txt"], ["/b.txt"], [("/c.txt", "/d.txt")])
    assert format_comparison_text("r1", "r2", comparison) == (
        "only in r1 : /a.txt\nonly in r2 : /b.txt\n"
        f"duplicates : /c.txt {EQ} /d.txt\n"
    )


def test_format_comparison_json():
    comparison = Comparison(["/a.txt"], [], [("/c.txt", "/d.txt")])
    text = format_comparison_json("r1", "r2", comparison)
    assert json.loads(text) == {
        "report_1": "r1",
        "report_2": "r2",
        "only_in_report_1": ["/a.txt"],
        "only_in_report_2": [],
        "duplicates": [{"path1": "/c.txt", "path2": "/d.txt"}],
    }
    assert '  "only_in_report_2": [\n  ],\n' in text


def test_format_comparison_csv():
    comparison = Comparison(["/a.txt"], ["/b,c.txt"], [("/c.txt", "/d.txt")])
    assert format_comparison_csv(comparison) == (
        "status,path1,path2\n"
        "only_in_first,/a.txt,\n"
        'only_in_second,,"/b,c.txt"\n'
        "duplicate,/c.txt,/d.txt\n"
    )