# blakediff

A command-line tool for finding duplicate and missing files. It hashes every
file under a directory with BLAKE3 and writes a plain-text report. You can then
search one report for duplicates, or compare two reports to see which files
only one of them has.

## Installation

```
pip install .
```

It needs Python 3.10 or later and depends only on the standard library.
BLAKE3 is computed in pure Python, so hashing large trees takes a while.

## Usage

### Generate a report

```
blakediff generate /some/directory > report.txt
blakediff generate --parallel /some/directory > report.txt
```

Every file below the directory is hashed and printed as one line holding the
hash and the path, separated by a single space:

```
<hash> <path>
```

If the argument is a file rather than a directory, that file alone is hashed.
Files of 16 KiB or more are memory-mapped; smaller ones are read directly.

`-p`/`--parallel` processes the entries of each directory on a thread pool and
gathers every failure into one error.

### Find duplicates in a report

```
blakediff analyze report.txt
blakediff analyze report.txt --format json
blakediff analyze report.txt --format csv
```

Each group of files that share a hash is printed once. The files within a group
are sorted, and the groups are sorted by their files. In text form a group
looks like:

```
duplicates : /a/one.txt 🟰 /b/one.txt
```

The CSV form has a `hash,file1,file2,file3,...` header and one row per group.

### Compare two reports

```
blakediff compare first.txt second.txt
blakediff compare first.txt second.txt --format json
blakediff compare first.txt second.txt --format csv
```

The output lists the files found only in the first report, then the files found
only in the second, then the pairs whose hash appears in both, each list sorted
by path. Passing a directory instead of a report file is an error.

### Verbosity and errors

Only errors are logged by default. `-v` lowers the threshold one step at a
time (`-v` for warnings, `-vv` for info, `-vvv` for debug) and `-q` raises it.
With `-vv`, `generate` logs how long it took.

On a bad report line or an I/O failure the command prints `Error: ...` to
standard error and exits with status 1.

## Library use

The modules can also be used from Python:

```python
from blakediff.blake3 import Blake3, blake3_hex
from blakediff.input import hash_file, hash_stream
from blakediff.reports import (
    compare_reports,
    find_duplicates_in_report,
    format_duplicates_text,
    parse_report_file,
)

print(blake3_hex(b"hello"))
print(Blake3().update(b"hel").update(b"lo").hexdigest())
print(hash_file("some/file.bin"))

entries = parse_report_file("report.txt")               # {hash: path}
duplicates = find_duplicates_in_report("report.txt")    # {hash: {paths}}
print(format_duplicates_text(duplicates), end="")

comparison = compare_reports("first.txt", "second.txt")
print(comparison.only_in_1, comparison.only_in_2, comparison.common)
```

`blakediff.reports` also has `format_duplicates_json`, `format_duplicates_csv`,
`format_comparison_text`, `format_comparison_json` and `format_comparison_csv`,
and the `OutputFormat` enum (`text`, `json`, `csv`). `blakediff.cli` offers
`generate`, `analyze`, `compare`, `visit_dirs` and `main`.

A report line that has no space in it raises `ReportFormatError` (a
`ValueError`), and the message gives the line number.

## Limits

`Blake3` produces only the default 32-byte digest in unkeyed mode; keyed
hashing, key derivation and extended output are not offered.