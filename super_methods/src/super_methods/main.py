#!/usr/bin/env python3
"""
Remove-super-methods (Python)
-----------------------------
Parses Closure-style JavaScript and deletes `@override` methods that only
forward their arguments, unchanged, to the immediate superclass's method of
the same name.

USAGE EXAMPLES
--------------
# 1) Run against an in-code sample (no files needed):
python -m super_methods.src.super_methods.main

# 2) Run against files and/or directories of .js files (recursive). All files
#    form one compilation, so a method defined in two of them is kept:
python -m super_methods.src.super_methods.main /path/to/js/project other.js

# 3) Show why candidates were kept:
SUPER_METHODS_LOG=DEBUG python -m super_methods.src.super_methods.main

DEPENDENCIES
------------
Option A (recommended for quick start):
    pip install tree-sitter tree-sitter-javascript

Option B (manual build):
    git clone https://github.com/tree-sitter/tree-sitter-javascript
    cc -shared -fPIC -Isrc src/parser.c src/scanner.c -o build/javascript.so
    export TS_LANGUAGE_SO=build/javascript.so
"""

import os
import sys

from super_methods.src.super_methods.inputs.directory_scanning import load_program
from super_methods.src.super_methods.logger import set_log_level
from super_methods.src.super_methods.outputs.output import print_summary, to_json, to_source
from super_methods.src.super_methods.parser import JavaScriptParser
from super_methods.src.super_methods.remove_super_methods import RemoveSuperMethodsPass

# --- Demo main ---------------------------------------------------------------

SAMPLE_JS = r"""
/** @constructor */
var Shape = function() {};
/** @param {number} scale */
Shape.prototype.resize = function(scale) {};
/** @return {string} */
Shape.prototype.describe = function() { return 'shape'; };

/** @constructor @extends {Shape} */
var Circle = function() {};
Circle.superClass_ = Shape.prototype;

/** @override */
Circle.prototype.resize = function(scale) {
  Circle.superClass_.resize.call(this, scale);
};

/** @override */
Circle.prototype.describe = function() {
  return 'circle: ' + Circle.superClass_.describe.call(this);
};
"""


def main():
    level = os.environ.get("SUPER_METHODS_LOG")
    if level:
        set_log_level(level.upper())

    parser = JavaScriptParser()

    # If paths are given, optimize those .js files; else use SAMPLE_JS
    if len(sys.argv) > 1:
        program = load_program(parser, sys.argv[1:])
    else:
        program = parser.parse_script(SAMPLE_JS, "<sample>")

    report = RemoveSuperMethodsPass().process(program)

    for script in program.scripts:
        print(f"\n=== {script.source_name} ===")
        print(to_source(script))

    # Print a concise human-readable summary
    print_summary(report)

    # Also print JSON (easy to persist)
    print("\n=== JSON ===")
    print(to_json(report))


if __name__ == "__main__":
    main()
