"""Commands that ship with the launcher."""

from ..models.command import Command, CommandType

BUILTIN_COMMANDS: tuple[Command, ...] = (
    Command(
        id="builtin-google",
        keyword="google",
        display_name="Google search",
        type=CommandType.URL,
        path_template="https://www.google.com/search?q={param}",
        is_builtin=True,
    ),
    Command(
        id="builtin-wiki",
        keyword="wiki",
        display_name="Wikipedia search",
        type=CommandType.URL,
        path_template="https://en.wikipedia.org/wiki/Special:Search?search={param}",
        is_builtin=True,
    ),
    Command(
        id="builtin-ping",
        keyword="ping",
        display_name="Ping a host",
        type=CommandType.SHELL,
        path_template="ping -c 4 {param}",
        is_builtin=True,
    ),
    Command(
        id="builtin-nslookup",
        keyword="nslookup",
        display_name="DNS lookup",
        type=CommandType.SHELL,
        path_template="nslookup {param}",
        is_builtin=True,
    ),
    Command(
        id="builtin-calc",
        keyword="calc",
        display_name="Calculator",
        type=CommandType.CALCULATOR,
        path_template="{param}",
        is_builtin=True,
    ),
    Command(
        id="builtin-home",
        keyword="home",
        display_name="Home folder",
        type=CommandType.DIRECTORY,
        path_template="~",
        is_builtin=True,
    ),
    Command(
        id="builtin-downloads",
        keyword="downloads",
        display_name="Downloads folder",
        type=CommandType.DIRECTORY,
        path_template="~/Downloads",
        is_builtin=True,
    ),
    Command(
        id="builtin-terminal",
        keyword="terminal",
        display_name="Open a terminal",
        type=CommandType.SHELL,
        path_template="$SHELL",
        is_builtin=True,
    ),
)
