from pathlib import PurePath

import pytest

from codetree.swift_processor import SwiftProcessor


@pytest.fixture
def processor():
    return SwiftProcessor()


def _find(interfaces, name):
    return next(i for i in interfaces if i.name == name)


def test_supported_extensions(processor):
    assert processor.supported_extensions() == ["swift"]


def test_language_name(processor):
    assert processor.language_name() == "Swift"


def test_extract_imports(processor):
    content = "import Foundation\nimport UIKit\n@_exported import MyModule\nimport CustomLib"
    deps = processor.extract_dependencies(content, PurePath("test.swift"))
    assert len(deps) == 4
    assert all(d.is_external for d in deps)
    assert [d.name for d in deps] == ["Foundation", "UIKit", "MyModule", "CustomLib"]
    assert [d.line_number for d in deps] == [1, 2, 3, 4]
    assert all(d.dependency_type == "import" and d.path == "test.swift" for d in deps)


def test_testable_import(processor):
    content = "\n@testable import RxSwift\nimport Foundation\n@_exported import MyModule\n"
    deps = processor.extract_dependencies(content, "Tests.swift")
    assert len(deps) == 3
    assert {d.name for d in deps} == {"RxSwift", "Foundation", "MyModule"}
    assert all(d.is_external for d in deps)


def test_extract_function(processor):
    content = "/// Documentation\npublic func calculate(x: Int, y: Int) -> Int { return x + y }"
    interfaces = processor.extract_interfaces(content, "test.swift")
    funcs = [i for i in interfaces if i.interface_type == "function"]
    assert len(funcs) == 1
    assert funcs[0].name == "calculate"
    assert funcs[0].visibility == "public"
    assert len(funcs[0].parameters) == 2
    assert funcs[0].return_type == "Int"
    assert funcs[0].description == "Documentation"


def test_extract_async_function(processor):
    content = "func fetchData() async throws -> Data { }"
    interfaces = processor.extract_interfaces(content, "test.swift")
    async_funcs = [i for i in interfaces if i.interface_type == "async_function"]
    assert len(async_funcs) == 1
    assert async_funcs[0].name == "fetchData"


def test_extract_initializers(processor):
    content = "init(name: String) { }\ninit?(id: Int) { }\nconvenience init() { }"
    interfaces = processor.extract_interfaces(content, "test.swift")
    inits = [i for i in interfaces if i.interface_type == "initializer"]
    assert len(inits) == 3
    assert [i.name for i in inits] == ["init", "init?", "init"]
    assert inits[0].parameters[0].name == "name"
    assert inits[0].parameters[0].param_type == "String"


def test_extract_class(processor):
    content = "public class MyClass { }\nfinal class FinalClass { }"
    interfaces = processor.extract_interfaces(content, "test.swift")
    assert any(i.name == "MyClass" and i.interface_type == "class" for i in interfaces)
    assert any(i.name == "FinalClass" and i.interface_type == "final_class" for i in interfaces)


def test_extract_struct(processor):
    interfaces = processor.extract_interfaces("struct User { let id: Int }", "test.swift")
    assert any(i.name == "User" and i.interface_type == "struct" for i in interfaces)


def test_extract_protocol(processor):
    interfaces = processor.extract_interfaces("protocol Drawable { func draw() }", "test.swift")
    assert any(i.name == "Drawable" and i.interface_type == "protocol" for i in interfaces)


def test_extract_enum(processor):
    content = "enum Direction { case north }\nindirect enum Tree { case leaf }"
    interfaces = processor.extract_interfaces(content, "test.swift")
    assert any(i.name == "Direction" and i.interface_type == "enum" for i in interfaces)
    assert any(i.name == "Tree" and i.interface_type == "indirect_enum" for i in interfaces)


def test_extract_properties(processor):
    content = "var name: String\nlet id: Int\nstatic var count: Int\nlazy var data: Data"
    interfaces = processor.extract_interfaces(content, "test.swift")
    assert any(i.name == "name" and i.interface_type == "property" for i in interfaces)
    assert any(i.name == "id" and i.interface_type == "constant" for i in interfaces)
    assert any(i.name == "count" and i.interface_type == "static_property" for i in interfaces)
    assert any(i.name == "data" and i.interface_type == "lazy_property" for i in interfaces)
    assert _find(interfaces, "name").return_type == "String"


def test_extract_typealias(processor):
    interfaces = processor.extract_interfaces("typealias Handler = (Int) -> Void", "test.swift")
    alias = _find(interfaces, "Handler")
    assert alias.interface_type == "typealias"
    assert alias.return_type == "(Int) -> Void"


def test_is_important_line(processor):
    assert processor.is_important_line("func test() { }")
    assert processor.is_important_line("class MyClass { }")
    assert processor.is_important_line("struct MyStruct { }")
    assert processor.is_important_line("// TODO: fix this")
    assert processor.is_important_line("init(name: String)")
    assert processor.is_important_line("var name: String")
    assert processor.is_important_line("@State var count = 0")
    assert processor.is_important_line("case north")
    assert not processor.is_important_line("x = 5")


def test_determine_component_type(processor):
    assert processor.determine_component_type("AppDelegate.swift", "") == "swift_app_delegate"
    swiftui = "@main struct MyApp: App { var body: some Scene { } }"
    assert processor.determine_component_type("MyApp.swift", swiftui) == "swift_swiftui_app"
    view = 'struct ContentView: View { var body: some View { Text("") } }'
    assert processor.determine_component_type("ContentView.swift", view) == "swift_swiftui_view"


@pytest.mark.parametrize(
    ("file_name", "content", "expected"),
    [
        ("SceneDelegate.swift", "", "swift_scene_delegate"),
        ("LoginViewController.swift", "", "swift_view_controller"),
        ("LoginTests.swift", "class A {}", "swift_test"),
        ("Main.swift", "@UIApplicationMain class A {}", "swift_main"),
        ("Screen.swift", "class Screen: UIViewController {}", "swift_view_controller"),
        ("P.swift", "protocol P {}", "swift_protocol"),
        ("E.swift", "enum E {}", "swift_enum"),
        ("X.swift", "extension String {}", "swift_extension"),
        ("F.swift", "let x = 1", "swift_file"),
    ],
)
def test_determine_component_type_variants(processor, file_name, content, expected):
    assert processor.determine_component_type(file_name, content) == expected


def test_generic_enum_parsing(processor):
    content = """
public enum Index<T: Any>: Comparable {
    case array(Int)
    case dictionary(DictionaryIndex<String, T>)
    case null
}
"""
    interfaces = processor.extract_interfaces(content, "test.swift")
    enums = [i for i in interfaces if i.interface_type == "enum"]
    assert len(enums) == 1
    assert enums[0].name == "Index"
    assert enums[0].visibility == "public"


def test_visibility_modifiers(processor):
    content = """
public func publicFunc() {}
private func privateFunc() {}
internal func internalFunc() {}
fileprivate func fileprivateFunc() {}
open class OpenClass {}
func defaultFunc() {}
"""
    interfaces = processor.extract_interfaces(content, "test.swift")
    assert _find(interfaces, "publicFunc").visibility == "public"
    assert _find(interfaces, "privateFunc").visibility == "private"
    assert _find(interfaces, "internalFunc").visibility == "internal"
    assert _find(interfaces, "fileprivateFunc").visibility == "fileprivate"
    assert _find(interfaces, "OpenClass").visibility == "open"
    assert _find(interfaces, "defaultFunc").visibility == "internal"


def test_mutating_function(processor):
    content = """
public mutating func merge(with other: JSON) throws {
    try self.merge(with: other, typecheck: true)
}
"""
    interfaces = processor.extract_interfaces(content, "test.swift")
    funcs = [i for i in interfaces if i.interface_type == "function"]
    assert len(funcs) == 1
    assert funcs[0].name == "merge"
    assert funcs[0].visibility == "public"


def test_computed_properties(processor):
    content = """
public var errorCode: Int { return self.rawValue }

public var object: Any {
    get {
        switch type {
        case .array: return rawArray
        default: return rawNull
        }
    }
    set {
        error = nil
    }
}
"""
    interfaces = processor.extract_interfaces(content, "test.swift")
    props = [i for i in interfaces if i.interface_type == "property"]
    assert any(p.name == "errorCode" for p in props)
    assert any(p.name == "object" for p in props)
    assert _find(props, "errorCode").return_type == "Int"


def test_objc_func_detection(processor):
    content = """
class ControlTarget: NSObject {
    @objc func eventHandler(_ sender: UIControl) {
        callback(())
    }

    @objc private func buttonTapped(_ sender: UIButton) {
        // handle tap
    }
}
"""
    interfaces = processor.extract_interfaces(content, "ControlTarget.swift")
    funcs = [i for i in interfaces if i.interface_type == "function"]
    assert any(f.name == "eventHandler" for f in funcs)
    assert any(f.name == "buttonTapped" for f in funcs)
    assert _find(funcs, "buttonTapped").visibility == "private"


def test_available_decorated_func(processor):
    content = """
@available(iOS 13.0, macOS 10.15, *)
public func asyncMethod() async throws -> String {
    return "result"
}

@available(*, deprecated, message: "Use newMethod instead")
func oldMethod() -> Int {
    return 0
}

@available(iOS 14.0, *) @MainActor public func mainActorMethod() {
    // runs on main actor
}
"""
    interfaces = processor.extract_interfaces(content, "API.swift")
    funcs = [
        i for i in interfaces if i.interface_type in ("function", "async_function")
    ]
    assert any(f.name == "asyncMethod" for f in funcs)
    assert any(f.name == "oldMethod" for f in funcs)
    assert any(f.name == "mainActorMethod" for f in funcs)


def test_generic_initializer_detection(processor):
    content = """
public struct Binder<Value>: ObserverType {
    public init<Target: AnyObject>(_ target: Target, scheduler: ImmediateSchedulerType = MainScheduler(), binding: @escaping (Target, Value) -> Void) {
        // implementation
    }

    public init<Target: AnyObject>(target: Target, binding: @escaping (Target, Value) -> Void) where Target: Sendable {
        // implementation
    }
}
"""
    interfaces = processor.extract_interfaces(content, "Binder.swift")
    inits = [i for i in interfaces if i.interface_type == "initializer"]
    assert len(inits) >= 2


def test_final_func_detection(processor):
    content = """
public final class PublishSubject {
    final func synchronized_dispose() {
        self.disposed = true
    }

    public final func finalPublicMethod() {
        // implementation
    }
}
"""
    interfaces = processor.extract_interfaces(content, "PublishSubject.swift")
    funcs = [i for i in interfaces if i.interface_type == "function"]
    assert any(f.name == "synchronized_dispose" for f in funcs)
    assert any(f.name == "finalPublicMethod" for f in funcs)


def test_property_type_inference(processor):
    content = """
class MyClass {
    private let lock = RecursiveLock()
    private var disposed = false
    private var observers = Observers()
    private var stopped = false
    fileprivate var rawArray: [Any] = []
    let stringValue = "hello"
    var intValue = 42
    var doubleValue = 3.14
    static let shared = MyClass()
}
"""
    interfaces = processor.extract_interfaces(content, "MyClass.swift")
    props = [
        i
        for i in interfaces
        if i.interface_type in ("property", "constant", "static_property")
    ]
    names = {p.name for p in props}
    assert {
        "lock",
        "disposed",
        "observers",
        "stopped",
        "rawArray",
        "stringValue",
        "intValue",
        "doubleValue",
        "shared",
    } <= names
    assert _find(props, "lock").return_type == "RecursiveLock"
    assert _find(props, "disposed").return_type == "Bool"
    assert _find(props, "stringValue").return_type == "String"
    assert _find(props, "intValue").return_type == "Int"
    assert _find(props, "doubleValue").return_type == "Double"
    assert _find(props, "rawArray").return_type == "[Any]"
    assert _find(props, "shared").interface_type == "static_property"


def test_local_binding_is_skipped(processor):
    content = "func run() {\n    if let value = optional {\n    }\n}"
    interfaces = processor.extract_interfaces(content, "Run.swift")
    assert [i.name for i in interfaces] == ["run"]


def test_doc_comment_skips_attributes(processor):
    content = "/// Does the work.\n@objc\nfunc run() {}"
    interfaces = processor.extract_interfaces(content, "Run.swift")
    assert _find(interfaces, "run").description == "Does the work."


def test_comment_lines_are_ignored(processor):
    content = "// func hidden() {}\n// class Hidden {}"
    assert processor.extract_interfaces(content, "Hidden.swift") == []


def test_weak_property(processor):
    interfaces = processor.extract_interfaces("weak var delegate: Delegate?", "W.swift")
    prop = _find(interfaces, "delegate")
    assert prop.interface_type == "weak_property"
    assert prop.return_type == "Delegate?"