# siggrep

Interactive grep for streaming text. Pipe a live stream into `sig` and type a
query. As lines arrive, `sig` shows only the lines that match, and it highlights
the matches. The lines scroll above a prompt at the bottom of the screen.

## Installation

```
pip install .
```

This installs the `sig` command. It needs a POSIX terminal, because it reads
keys from `/dev/tty` in raw mode.

## Usage

Filter a live stream from standard input:

```
$ tail -f /var/log/syslog | sig
```

Run a command and stream its stdout and stderr. Press `ctrl+r` to run the
command again:

```
$ sig --cmd "tail -f /var/log/syslog"
```

The command string is split on whitespace and run directly. No shell takes part,
so quoting, pipes and redirections inside it are not interpreted.

Archived mode collects lines first. Collection ends when the source ends, or
when no new line arrives within the retrieval timeout. You then grep through
the collected lines and can move up and down the list:

```
$ cat README.md | sig -a
$ sig -a --cmd "cat README.md"
```

In streaming mode, `ctrl+f` switches to archived mode with the lines kept so far.

### Queries

The query is a regular expression. Separate several patterns with `|`. A line
matches when any of the patterns matches it. Whitespace around each pattern is
ignored, and so are empty patterns. An empty query shows every line. A query
with an invalid pattern matches nothing.

Escape sequences and control characters are removed from incoming lines.
Newlines and tabs become spaces.

### Options

| Option | Default | Meaning |
| --- | --- | --- |
| `--retrieval-timeout MS` | 10 | Time to wait for the next line from the stream, in milliseconds |
| `--render-interval MS` | 10 | Minimum interval between rendered lines, in milliseconds. Raise it to reduce flicker |
| `-q`, `--queue-capacity N` | 1000 | How many recent lines are kept for archived mode. The oldest line is dropped once more than N are held |
| `-a`, `--archived` | off | Grep through collected data instead of a live stream |
| `-i`, `--ignore-case` | off | Case-insensitive search |
| `--cmd COMMAND` | — | Command to run at start and on every retry |
| `--version` | — | Print the version and exit |

### Keys

| Key | Streaming mode | Archived mode |
| --- | --- | --- |
| `ctrl+f` | Switch to archived mode | — |
| `ctrl+r` | Restart the `--cmd` command (only with `--cmd`) | Go back to streaming (only with `--cmd`, and not when started with `-a`) |
| `ctrl+c` | Quit | Quit with exit status 1 |
| `←` / `→` | Move the query cursor | Move the query cursor |
| `↑` / `↓` | — | Move through the list of lines |
| `ctrl+a` / `ctrl+e` | Go to the start or end of the query | Go to the start or end of the query |
| `Backspace` | Delete the character before the cursor | Delete the character before the cursor |
| `ctrl+u` | Clear the query | Clear the query |

## Using it as a library

The pieces behind the command can be used on their own:

- `siggrep.highlight.styled(query, line, case_insensitive=False)` returns a
  `StyledLine` whose `highlighted` set holds the matched character positions.
  It returns `None` when the line does not match. `StyledLine.render(style)`
  produces ANSI text, and `StyledLine.wrap(width, height)` splits the line into
  rows.
- `siggrep.sources.execute` and `siggrep.sources.read_stdin` are coroutines
  that put sanitized lines on an `asyncio.Queue` and then put `None`.
  `siggrep.sources.sanitize` cleans a single line.
- `siggrep.keymap` has the editing state (`TextEditor`, `Listbox`) and the key
  bindings of both modes (`streaming_keymap`, `archived_keymap`).
- `siggrep.cli.main(argv=None)` runs the command and returns its exit status.

## Limitations

- It does not run on Windows. Terminal handling uses `termios` and `/dev/tty`.
- There is no query history. Archived mode cannot select or copy a line.
- Only the bindings listed above are handled. Other keys, such as `Home`, `End`
  and `Delete`, are ignored.

## Development

```
pip install -e ".[test]"
pytest
```