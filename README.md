# codetree

Regex-based source analysers. Each processor reads the text of one source file
and reports:

- the dependencies it declares (imports, `use` and `mod` statements,
  `require`/`include`, `// composer:` comments, namespaces),
- the interfaces it defines (functions, methods, classes, traits, structs,
  enums, protocols, extensions, properties, type aliases, `impl` blocks),
- a coarse component type for the file (for example `python_test`,
  `rust_main`, `php_interface`, `swift_swiftui_view`),
- whether a given line is worth keeping in a summary.

| Processor         | Module                       | `supported_extensions()` | `language_name()` |
|-------------------|------------------------------|--------------------------|-------------------|
| `PythonProcessor` | `codetree.python_processor`  | `["py"]`                 | `"Python"`        |
| `RustProcessor`   | `codetree.rust_processor`    | `["rs"]`                 | `"Rust"`          |
| `PhpProcessor`    | `codetree.php_processor`     | `["php"]`                | `"PHP"`           |
| `SwiftProcessor`  | `codetree.swift_processor`   | `["swift"]`              | `"Swift"`         |

Every processor implements the abstract `LanguageProcessor` from
`codetree.models`:

- `extract_dependencies(content, file_path)` → list of `Dependency`
- `extract_interfaces(content, file_path)` → list of `InterfaceInfo`
- `determine_component_type(file_path, content)` → `str`
- `is_important_line(line)` → `bool`
- `supported_extensions()` and `language_name()`

`Dependency`, `InterfaceInfo` and `ParameterInfo` are plain dataclasses.
`file_path` may be a `str` or any path-like object; only its text and file
name are used, the file itself is never read.

The lower-level helpers used by the PHP and Swift processors are public too:
`codetree.php_syntax` (use-statement expansion, parameter parsing, docblocks,
attributes, composer namespaces) and `codetree.swift_syntax` (visibility,
names, parameters, return types, type inference, doc comments).

## Installation

```
pip install codetree
```

The package has no runtime dependencies.

## Usage

```python
from pathlib import Path

from codetree.swift_processor import SwiftProcessor

processor = SwiftProcessor()
source = "/// Adds two numbers\npublic func calculate(x: Int, y: Int) -> Int { return x + y }"

for iface in processor.extract_interfaces(source, Path("Math.swift")):
    print(iface.name, iface.interface_type, iface.visibility, iface.return_type)
    for param in iface.parameters:
        print("  ", param.name, param.param_type, param.is_optional)

for dep in processor.extract_dependencies("import Foundation", Path("Math.swift")):
    print(dep.name, dep.dependency_type, dep.is_external)

print(processor.determine_component_type(Path("AppDelegate.swift"), ""))
# swift_app_delegate
```

### PHP namespaces

`PhpProcessor` treats a `use` import as internal when its first namespace
segment, lower-cased, is in its set of internal namespaces. Created without
arguments, that set is `app`, `src`, `lib`, `core`, `domain` and `infra`, plus
the PSR-4 and PSR-0 prefixes under `autoload` and `autoload-dev` in a
`composer.json` in the current working directory, if there is one. You can
pass your own set instead:

```python
from codetree.php_processor import PhpProcessor

processor = PhpProcessor(internal_namespaces={"acme"})
processor.is_internal_namespace("Acme\\Billing\\Invoice")  # True
```

## What it does not do

codetree works on one file's text at a time. It has no command-line tool, does
not walk directories or read files, and does not pick a processor for a file
by itself: choose one by comparing the file's extension with each processor's
`supported_extensions()`. The analysis is line- and regex-based, not a real
parser, so unusual formatting can be missed or misread.

## Tests

The test suite uses pytest; install it with the `test` extra
(`pip install "codetree[test]"`).