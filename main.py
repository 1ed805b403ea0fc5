from rich.pretty import pprint

from gitnaut import *


@Arguments.define
def arguments(builder):
    builder.literal("commit")
    builder.flag(["all", "a"])
    builder.value(["message", "m"], inline=True, allow_empty=True)
    builder.key_value("trailers", "--trailer")
    builder.flag("verify", negatable=True)
    builder.conflicts("all", "message")


if __name__ == '__main__':
    pprint(arguments)
    pprint(arguments.bind(message="fix typo", trailers={"Signed-off-by": "Jane <jane@example.com>"}, verify=False))
    try:
        arguments.bind(all=True, m="oops")
    except BindingError as fault:
        trigger(fault, shell=True, fancy=True, colorful=True)
