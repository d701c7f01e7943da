import os

from ..errors import ArgumentError


COMMAND_HELP = {
    'enter': """enter <bucket>
  Enter the bucket with the given name.""",

    'leave': """leave
  Leave the current bucket and return to the bucket list.""",

    'cd': """cd <dir>
  Change the current directory inside the entered bucket.
  cd ..           Go up one level
  cd /            Go to bucket root
  Without an entered bucket, 'cd name' enters bucket 'name'.""",

    'ls': """ls [dir]
  List objects in the current directory or in [dir].
  Without an entered bucket the buckets are listed.""",

    'pwd': """pwd
  Print the current bucket and directory.""",

    'rm': """rm <name> [-r]
  Remove an object. Directories need the -r flag and are removed
  recursively, object by object.""",

    'dl': """dl <src> <dst>
  Download remote object or directory <src> to local path <dst>.""",

    'ul': """ul <src> <dst>
  Upload local file or directory <src> to remote key <dst>.""",

    'mv': """mv <src> <dst>
  Copy remote object or directory <src> to <dst>, then delete each
  source object once its copy succeeded.""",

    'cp': """cp <src> <dst>
  Copy remote object or directory <src> to <dst>.""",

    'touch': """touch <name>
  Create an empty object. A name ending in '/' creates a directory.""",

    'cat': """cat <name>
  Print the content of an object.""",

    'find': """find <needle> [prefix]
  List all objects below [prefix] with <needle> in the last part of
  the object key (case-insensitive).""",

    'list': """list {bucket|env}
  List buckets or saved environments.""",

    'mkbucket': """mkbucket <name>
  Create a new bucket.""",

    'rmbucket': """rmbucket <name>
  Delete a bucket and all objects in it. Asks twice for confirmation.""",

    'help': """help [command]
  Show available commands or detailed help for a specific command.""",

    'clear': """clear
  Clear the terminal screen.""",

    'exit': """exit
  Exit the shell (aliases: q, quit).""",
}


COMMAND_CATEGORIES = [
    ('Buckets', ['enter', 'leave', 'list', 'mkbucket', 'rmbucket']),
    ('Navigation', ['ls', 'cd', 'pwd', 'find']),
    ('Objects', ['cat', 'touch', 'rm', 'cp', 'mv']),
    ('Transfer', ['dl', 'ul']),
    ('Shell', ['help', 'clear', 'exit']),
]


def do_exit(app, *args):
    """Exit the shell."""
    return False


def do_clear(app, *args):
    """Clear the terminal screen."""
    os.system('cls' if os.name == 'nt' else 'clear')


def do_help(app, *args):
    """Show available commands or detailed help for a specific command."""
    if args:
        cmd_name = args[0].lower()
        if cmd_name in COMMAND_HELP:
            print()
            print(COMMAND_HELP[cmd_name])
            print()
        elif cmd_name in app.commands:
            print("  No detailed help available for '%s'." % cmd_name)
        else:
            raise ArgumentError("unknown command %r" % cmd_name)
        return

    print("\nAvailable commands:\n")
    for category, cmds in COMMAND_CATEGORIES:
        available = [c for c in cmds if c in app.commands]
        if available:
            if app.colors:
                print("  \033[1m%s\033[0m" % category)
            else:
                print("  %s" % category)
            for name in available:
                print("    %-16s -  %s" % (name, app.commands[name].summary))
            print()
    print("Type 'help <command>' for detailed usage. Use TAB for completion.")
