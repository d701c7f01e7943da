import math

COLOR_WARNING = '\033[1;31m'
COLOR_HIGHLIGHT = '\033[1;31m'
COLOR_TARGET = '\033[1;32m'
COLOR_PREFIX = '\033[1;34m'
COLOR_END = '\033[0m'

# room for "1023 GiB" or "9.9 GiB" plus padding for byte sizes
SIZE_WIDTH = 11
DIR_PADDING = ' ' * (SIZE_WIDTH + 2)

IEC_UNITS = ['B', 'KiB', 'MiB', 'GiB', 'TiB', 'PiB']


def _shown(size):
    """The value as printed: one decimal below 10, whole numbers above."""
    if size < 10:
        return math.floor(size * 10 + 0.5) / 10
    return math.floor(size + 0.5)


def human_readable_size(size_bytes):
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    index = 0
    last = len(IEC_UNITS) - 1
    # promote while the printed value would reach 1024
    while index < last and (size >= 1024.0 or _shown(size) >= 1024):
        size /= 1024.0
        index += 1
    shown = _shown(size)
    if shown < 10:
        return f"{shown:.1f} {IEC_UNITS[index]}"
    return f"{shown:.0f} {IEC_UNITS[index]}"


def pluralize(count, noun):
    if count == 1:
        return f"1 {noun}"
    return f"{count} {noun}s"


def colorize(text, color, enabled=True):
    if not enabled or not text:
        return text
    return f"{color}{text}{COLOR_END}"


def highlight(name, needle, enabled=True):
    """Wrap every case-insensitive occurrence of needle in name."""
    if not needle:
        return name
    lower_name = name.lower()
    lower_needle = needle.lower()
    parts = []
    i = 0
    while i < len(name):
        pos = lower_name.find(lower_needle, i)
        if pos == -1:
            parts.append(name[i:])
            break
        parts.append(name[i:pos])
        parts.append(colorize(name[pos:pos + len(needle)], COLOR_HIGHLIGHT, enabled))
        i = pos + len(needle)
    return ''.join(parts)


def format_size_column(size_bytes):
    size_str = human_readable_size(size_bytes)
    if size_str.endswith(' B'):
        # line the digits up with the three letter units
        size_str += '  '
    return size_str.rjust(SIZE_WIDTH)


def format_dir_entry(name, pad=True):
    padding = DIR_PADDING if pad else ''
    return f"  D  {padding}{name}"


def format_file_entry(name, size_bytes):
    return f"  F  {format_size_column(size_bytes)}  {name}"


def format_bucket_entry(name):
    return f"  B  {name}"


def format_env_entry(name, endpoint, width=0):
    return f"  E  {name.ljust(width)}  ->  {endpoint}"


def format_found(count, noun):
    return f"Found {pluralize(count, noun)}:"


def format_prompt(target_key, bucket, prefix, colors=True):
    if bucket:
        head = colorize(f"{{{bucket}@{target_key}}}", COLOR_TARGET, colors)
        return f"{head}{colorize(prefix, COLOR_PREFIX, colors)}> "
    return f"{colorize(f'{{{target_key}}}', COLOR_TARGET, colors)}> "


def format_warning_banner(title, colors=True):
    bar = '#' * (len(title) + 10)
    lines = [bar, f"###  {title}  ###", bar]
    return colorize('\n'.join(lines), COLOR_WARNING, colors)
