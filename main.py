import sys

from rich.pretty import pprint

from cmdopts import *

__prog__ = "demo"

group = OptionsGroup([
    make_option("verbose,v", "talk more", constraint=constrain().occurrences(0, 3)),
    make_option("quiet,q", "talk less", constraint=constrain().mutual_exclusion(["verbose"])),
    make_option("output,o", "where to write", value(str)),
    make_option("jobs,j", "parallel jobs", value(uint8, 1)),
    make_operand("source", "file to read", value(str), position=0, constraint=constrain().occurrences(1)),
    make_operands_error(),
])


if __name__ == '__main__':
    pprint(parse_arguments(sys.argv[1:], group, shell=True, fancy=True))
