"""Tests for full parsing walks over single-file components."""

from collections.abc import Callable
from pathlib import Path

import pytest
from conftest import WalkResult

from vuedoc.dispatcher import EntryEvent
from vuedoc.entries import (
    ComputedEntry,
    DataEntry,
    EventEntry,
    Keyword,
    MemberEntry,
    MethodEntry,
    ModelEntry,
    Parameter,
    ReturnValue,
    SlotEntry,
)
from vuedoc.options import ConfigurationError, ParserOptions
from vuedoc.parser import VuedocParser

Walk = Callable[..., WalkResult]

FILENAME = "./fixtures/checkbox.vue"

TEMPLATE = """
  <div>
    <!-- Template event with @ -->
    <input @input="$emit('template-@-event', $event)">

    <!-- Template event with v-on -->
    <input v-on:input="$emit('template-v-on-event', $event)" />

    <label>
      <input :disabled="disabled" type="text" v-model="checkbox">
      <!-- Default slot -->
      <slot></slot>
      <!-- Use this slot to set the checkbox label -->
      <slot name="label">Unamed checkbox</slot>
      <!--
        This
        is multiline description
      -->
      <slot name="multiline">Unamed checkbox</slot>
      <slot name="undescribed"></slot>
      <template></template>
    </label>
  </div>
"""

SCRIPT = """
  const componentName = 'checkboxPointer'
  const aliasName = componentName

  /**
   * The generic component
   * Sub description
   *
   *
   * @public
   * @alpnum azert0 123456789
   * @generic Keyword generic description
   * @multiline Keyword multiline
   *            description
   * @punctuations !,?;.:!
   *
   * @slot inputs - Use this slot to define form inputs ontrols
   * @slot actions - Use this slot to define form action buttons controls
   * @slot footer - Use this slot to define form footer content.
   */
  export default Vue.extend({
    name: 'checkbox',
    name: componentName,

    model: {
      prop: 'model',
      event: 'input'
    },

    props: {
      /**
       * The checkbox model
       */
      model: {
        type: Array,
        required: true
      },

      /**
       * Initial checkbox state
       */
      disabled: Boolean,

      /**
       * Initial checkbox value
       */
      checked: {
        type: Boolean,
        default: true
      },

      // Prop with multiple type
      active: [Number, Boolean],

      // Prop with arrow function
      propWithArrow: {
        type: Object,
        default: () => ({ name: 'X'})
      },
    },

    data () {
      const pointer = 'pointed value'

      return {
        int: 12,
        pointer: pointer,
      }
    },

    data: {
      int: 13
    },

    computed: {
      id () {
        const name = this.componentName

        return `${name}-${this.pointer}`
      },
      name () {
        return this.componentName
      }
    },

    methods: {
      /**
      * @private
      */
      privateMethod () {
        console.log('check')

        const name = 'check'
        const value = 'event value'

        if (name) {
          console.log('>', name)
        }

        /**
        * Event with identifier name
        */
        this.$emit(name, value)
      },

      /**
      * Check the checkbox
      */
      check () {
        let eventName = 'check'
        const value = 'event value'

        eventName = 'renamed'

        /**
        * Event with renamed identifier name
        */
        this.$emit(eventName, value)
      },

      /**
      * @protected
      */
      recursiveIdentifierValue () {
        let recursiveValue = 'recursive'
        const value = 'event value'

        if (eventName) {
          console.log('>', eventName)
          this.$emit('if-event', value)
        } else if (value) {
          this.$emit('else-if-event', value)
        } else {
          this.$emit('else-event', 123)
        }

        for (let i = 0; i < 0; i++) {
          this.$emit('for-event', value)
        }

        for (let i of []) {
          this.$emit('for-of-event', value)
        }

        for (let i in {}) {
          this.$emit('for-in-event', value)
        }

        do {
          this.$emit('do-while-event', value)
        } while (false)

        while (false) {
          this.$emit('while-event', value)
        }

        switch (x) {
          case 1:
            this.$emit('switch-case-event', value)
            break

          default:
            this.$emit('switch-case-default-event', value)
            break
        }

        try {
          this.$emit('try-event', value)
        } catch (e) {
          this.$emit('try-catch-event', value)
        } finally {
          this.$emit('try-finally-event', value)
        }

        eventName = recursiveValue

        /**
        * Event with recursive identifier name
        */
        this.$emit(eventName, value, 12)
      },

      uncommentedMethod (a, b = 2, c = this.componentName) {},
      withAlias (a = aliasName) {},
      withSpread (...args) {},
      withDestructuring ({ x, y }) {},
    },

    beforeRouteEnter (to, from, next) {
      next((vm) => {
        /**
         * beforeRouteEnter event description
         */
        vm.$emit('beforeRouteEnter-event', this.value)
      })
    },

    beforeRouteLeave (to, from, next) {
      next((vm) => {
        /**
         * beforeRouteLeave event description
         */
        vm.$emit('beforeRouteLeave-event', this.value)
      })
    },

    created () {
      /**
       * Created event description
       */
      this.$emit('created-event', this.value)
    },

    destroyed () {
      this.$emit('destroyed-event', this.value)
    },

    render (createElement, { props }) {
      /**
       * render event description
       */
      this.$emit('render-event', this.value)
    }
  })
"""

FULL_COMPONENT = f"<script>{SCRIPT}</script>\n<template>{TEMPLATE}</template>"

SCRIPT_EVENTS = [
    "check",
    "renamed",
    "if-event",
    "else-if-event",
    "else-event",
    "for-event",
    "for-of-event",
    "for-in-event",
    "do-while-event",
    "while-event",
    "switch-case-event",
    "switch-case-default-event",
    "try-event",
    "try-catch-event",
    "try-finally-event",
    "recursive",
    "beforeRouteEnter-event",
    "beforeRouteLeave-event",
    "created-event",
    "destroyed-event",
    "render-event",
]

FEATURE_CHANNELS = [
    ("name", "name"),
    ("description", "description"),
    ("keywords", "keywords"),
    ("model", "model"),
    ("props", "prop"),
    ("data", "data"),
    ("computed", "computed"),
    ("methods", "method"),
    ("events", "event"),
    ("slots", "slot"),
]


def script(body: str) -> str:
    """Wrap a logic section into a component source."""
    return f"<script>{body}</script>"


def template(body: str) -> str:
    """Wrap markup into a component source."""
    return f"<template>{body}</template>"


# -----------------------------
# Options
# -----------------------------


def test_validate_options_requires_source() -> None:
    """Verify a missing source is rejected."""
    with pytest.raises(
        ConfigurationError,
        match="options.filename or options.filecontent is required",
    ):
        VuedocParser.validate_options(ParserOptions())


def test_validate_options_accepts_inline_source() -> None:
    """Verify empty inline source and known features are accepted."""
    VuedocParser.validate_options(ParserOptions(filecontent=""))
    VuedocParser.validate_options(
        ParserOptions(filecontent="", features=["name", "events"])
    )


@pytest.mark.parametrize(
    ("options", "message"),
    [
        (
            ParserOptions(filecontent="", features="events"),
            r"options\.features must be an array",
        ),
        (
            ParserOptions(filecontent="", features=["invalid-feature"]),
            r"Unknown 'invalid-feature' feature\. Supported features:",
        ),
        (
            ParserOptions(filecontent="", ignored_visibilities=["hidden"]),
            r"Unknown 'hidden' visibility\. Supported visibilities:",
        ),
    ],
)
def test_validate_options_rejects(options: ParserOptions, message: str) -> None:
    """Verify malformed options fail before any walk."""
    with pytest.raises(ConfigurationError, match=message):
        VuedocParser(options)


# -----------------------------
# Full component
# -----------------------------


def test_full_component(walk: Walk) -> None:
    """Verify every category of a complete component, in order."""
    result = walk(FULL_COMPONENT, filename=FILENAME)

    assert result.channels[:4] == ["name", "description", "keywords", "model"]
    assert result.channels[-1] == "end"
    assert result.channels.count("end") == 1
    assert result.first("name").value == "checkboxPointer"
    assert result.first("description").value == "The generic component\nSub description"
    assert [k.name for k in result.first("keywords").value] == [
        "alpnum",
        "generic",
        "multiline",
        "punctuations",
    ]
    model = ModelEntry(name="model", prop="model", event="input")
    assert result.first("model") == model

    props = result.of("prop")
    assert [(p.name, p.type, p.default) for p in props] == [
        ("model", "array", None),
        ("disabled", "boolean", None),
        ("checked", "boolean", "true"),
        ("active", ["number", "boolean"], None),
        ("prop-with-arrow", "object", '{"name":"X"}'),
    ]
    assert props[0].required is True
    assert props[0].describe_model is True
    assert props[0].description == "The checkbox model"

    data = DataEntry(name="int", type="number", initial_value="13")
    assert result.of("data") == [data]
    assert [(c.name, c.dependencies) for c in result.of("computed")] == [
        ("id", ["componentName", "pointer"]),
        ("name", ["componentName"]),
    ]

    methods = {m.name: m for m in result.of("method")}
    assert list(methods) == [
        "check",
        "uncommentedMethod",
        "withAlias",
        "withSpread",
        "withDestructuring",
    ]
    assert methods["uncommentedMethod"].syntax == [
        "uncommentedMethod(a: unknown, b: number = 2, "
        "c: unknown = this.componentName): void"
    ]
    assert methods["withAlias"].params == [
        Parameter("a", "string", default_value="aliasName")
    ]
    assert methods["withSpread"].params == [Parameter("args", rest=True)]
    assert methods["withDestructuring"].params == [Parameter("x"), Parameter("y")]

    events = result.of("event")
    assert [e.name for e in events] == [
        *SCRIPT_EVENTS,
        "template-@-event",
        "template-v-on-event",
    ]
    by_name = {e.name: e for e in events}
    assert by_name["check"].description == "Event with identifier name"
    assert by_name["check"].arguments == [Parameter("value", "string")]
    assert by_name["recursive"].arguments == [
        Parameter("value", "string"),
        Parameter("12", "number"),
    ]
    assert by_name["beforeRouteEnter-event"].description == (
        "beforeRouteEnter event description"
    )
    assert by_name["destroyed-event"].description is None
    assert by_name["template-@-event"].description == "Template event with @"

    assert [(s.name, s.description) for s in result.of("slot")] == [
        ("default", "Default slot"),
        ("label", "Use this slot to set the checkbox label"),
        ("multiline", "This\nis multiline description"),
        ("undescribed", None),
        ("inputs", "Use this slot to define form inputs ontrols"),
        ("actions", "Use this slot to define form action buttons controls"),
        ("footer", "Use this slot to define form footer content."),
    ]
    assert result.warnings == (
        "Duplicate 'name' declaration",
        "Duplicate 'data' declaration",
    )


def test_empty_features_only_end(walk: Walk) -> None:
    """Verify an empty feature list disables every category."""
    result = walk(FULL_COMPONENT, features=[])
    assert result.channels == ["end"]


@pytest.mark.parametrize(("feature", "channel"), FEATURE_CHANNELS)
def test_feature_gating(walk: Walk, feature: str, channel: str) -> None:
    """Verify excluding one feature removes only its entries."""
    full = walk(FULL_COMPONENT, filename=FILENAME)
    features = [name for name, _ in FEATURE_CHANNELS if name != feature]
    result = walk(FULL_COMPONENT, filename=FILENAME, features=features)
    assert channel not in result.channels
    assert result.dispatched == [d for d in full.dispatched if d[0] != channel]


@pytest.mark.parametrize("alias", ["prop", "method", "event", "slot"])
def test_feature_aliases(walk: Walk, alias: str) -> None:
    """Verify singular feature names select the same channel."""
    result = walk(FULL_COMPONENT, features=[alias])
    assert set(result.channels) == {alias, "end"}


@pytest.mark.parametrize("visibility", ["public", "protected", "private"])
def test_visibility_filtering(walk: Walk, visibility: str) -> None:
    """Verify hidden visibilities never reach listeners."""
    result = walk(FULL_COMPONENT, ignored_visibilities=[visibility])
    members = [e for _, e in result.dispatched if isinstance(e, MemberEntry)]
    assert members
    assert all(entry.visibility != visibility for entry in members)


def test_nothing_to_emit(walk: Walk) -> None:
    """Verify unknown options produce no entries."""
    body = """
    export default {
      description: 'desc-v',
      unknow: {
        /**
         * @model v-model keyword
         */
        value: { type: String }
      }
    }
    """
    assert walk(script(body)).channels == ["end"]


def test_empty_source(walk: Walk) -> None:
    """Verify empty inline source only ends the walk."""
    assert walk("").channels == ["end"]


def test_read_source_from_file(walk: Walk, tmp_path: Path) -> None:
    """Verify the source is read from the file with the configured encoding."""
    path = tmp_path / "MyButton.vue"
    path.write_text(
        "<script>/** Café */\nexport default {}</script>", encoding="latin-1"
    )
    result = walk(filename=path, encoding="latin-1")
    assert result.first("name").value == "MyButton"
    assert result.first("description").value == "Café"


# -----------------------------
# Protocol
# -----------------------------


HELLO = script("export default { name: 'hello' }")


def test_listeners_fire_in_registration_order() -> None:
    """Verify every listener of a channel receives the entry."""
    parser = VuedocParser(ParserOptions(filecontent=HELLO))
    calls: list[str] = []
    parser.add_event_listener("name", lambda e: calls.append(f"a:{e.entry.value}"))
    parser.add_event_listener("name", lambda e: calls.append(f"b:{e.entry.value}"))
    parser.add_event_listener("end", lambda e: calls.append("end"))
    parser.walk()
    assert calls == ["a:hello", "b:hello", "end"]


def test_stop_immediate_propagation() -> None:
    """Verify a listener can stop the remaining listeners of one dispatch."""
    parser = VuedocParser(ParserOptions(filecontent=HELLO))
    calls: list[str] = []

    def first(event: EntryEvent) -> None:
        calls.append("first")
        event.stop_immediate_propagation()

    parser.add_event_listener("name", first)
    parser.add_event_listener("name", lambda e: calls.append("second"))
    parser.add_event_listener("end", lambda e: calls.append("end"))
    parser.walk()
    assert calls == ["first", "end"]


def test_removed_listener_is_not_called() -> None:
    """Verify unsubscribed listeners no longer fire."""
    parser = VuedocParser(ParserOptions(filecontent=HELLO))
    calls: list[str] = []

    def listener(event: EntryEvent) -> None:
        calls.append(event.channel)

    parser.add_event_listener("name", listener)
    parser.remove_event_listener("name", listener)
    parser.walk()
    assert calls == []


def test_walk_is_not_reentrant() -> None:
    """Verify a listener cannot start a nested walk."""
    parser = VuedocParser(ParserOptions(filecontent=HELLO))

    def nested(event: EntryEvent) -> None:
        parser.walk()

    parser.add_event_listener("name", nested)
    with pytest.raises(RuntimeError, match="cannot be called while a walk is running"):
        parser.walk()
    parser.remove_event_listener("name", nested)
    parser.walk()


# -----------------------------
# Component lookup and name
# -----------------------------


@pytest.mark.parametrize(
    "body",
    [
        """
        import child from 'child.vue'
        const component = { name: 'hello' }
        export default component
        """,
        """
        import library from 'library'
        library.init()
        const component = { name: 'hello' }
        export default component
        """,
        "export default defineComponent({ name: 'hello' })",
    ],
)
def test_exported_component_lookup(walk: Walk, body: str) -> None:
    """Verify indirect and wrapped exports are followed."""
    assert walk(script(body)).first("name").value == "hello"


def test_unresolved_export(walk: Walk) -> None:
    """Verify an unresolved export skips the script without failing."""
    result = walk(script("export default component"), filename=FILENAME)
    assert result.channels == ["end"]
    assert result.warnings == ("Unable to resolve the exported 'component'",)


def test_name_sources(walk: Walk) -> None:
    """Verify explicit, documented and file-derived names."""
    result = walk(script("export default { name: 'myInput' }"))
    assert result.first("name").value == "myInput"
    result = walk(script("/** @name my-checkbox */\nexport default {}"))
    assert result.first("name").value == "my-checkbox"
    result = walk(template("<div><p>Hello</p></div>"), filename=FILENAME)
    assert result.first("name").value == "checkbox"


def test_name_disabled(walk: Walk) -> None:
    """Verify the name is not emitted when its feature is disabled."""
    body = script("export default { name: 'myInput' }")
    result = walk(body, features=["description"])
    assert result.channels == ["end"]
    result = walk(template("<div></div>"), filename=FILENAME, features=["description"])
    assert result.channels == ["end"]


# -----------------------------
# Description and keywords
# -----------------------------


def test_description(walk: Walk) -> None:
    """Verify the component description keeps inner blank lines."""
    body = """
    /**
     * Component description
     * on multiline
     *
     * with preserve
     *
     *
     * whitespaces
     */
    export default {}
    """
    result = walk(script(body))
    assert result.first("description").value == (
        "Component description\non multiline\n\nwith preserve\n\n\nwhitespaces"
    )
    assert "description" not in walk(script(body), features=["name"]).channels


def test_component_keywords(walk: Walk) -> None:
    """Verify component keywords exclude name, slot and mixin tags."""
    body = """
    /**
     * @name my-checkbox
     * @slot default slot
     * @mixin checkable
     * @tagtest 1.0.0
     */
    export default {}
    """
    result = walk(script(body))
    assert result.first("keywords").value == [Keyword("tagtest", "1.0.0")]


def test_description_on_declaration(walk: Walk) -> None:
    """Verify the comment of an exported declaration documents the component."""
    body = """
    /** Declared component */
    const component = { name: 'hello' }
    export default component
    """
    assert walk(script(body)).first("description").value == "Declared component"


# -----------------------------
# Model
# -----------------------------


@pytest.mark.parametrize(
    ("declaration", "prop", "event"),
    [
        ("{ prop: 'model', event: 'change' }", "model", "change"),
        ("{ prop: 'model' }", "model", "input"),
        ("{ event: 'change' }", "value", "change"),
        ("{}", "value", "input"),
    ],
)
def test_model(walk: Walk, declaration: str, prop: str, event: str) -> None:
    """Verify model defaults."""
    result = walk(script(f"export default {{ model: {declaration} }}"))
    assert result.first("model") == ModelEntry(name=prop, prop=prop, event=event)


def test_model_prop_is_flagged(walk: Walk) -> None:
    """Verify the prop bound by the model option describes the model."""
    body = """
    export default {
      model: { prop: 'checked' },
      props: { checked: { type: String } }
    }
    """
    prop = walk(script(body)).first("prop")
    assert prop.name == "checked"
    assert prop.describe_model is True


# -----------------------------
# Data
# -----------------------------


@pytest.mark.parametrize(
    ("declaration", "value", "initial", "type_name"),
    [
        ("data: { /** ID data */ id: 12 }", "id", "12", "number"),
        (
            "data: () => ({ /** ID data */ enabled: false })",
            "enabled",
            "false",
            "boolean",
        ),
        (
            "data: function () { return { /** ID data */ id: 'Hello' } }",
            "id",
            '"Hello"',
            "string",
        ),
        (
            "data () { return { /** ID data */ id: 'Hello' } }",
            "id",
            '"Hello"',
            "string",
        ),
    ],
)
def test_data_forms(
    walk: Walk, declaration: str, value: str, initial: str, type_name: str
) -> None:
    """Verify object and function data declarations."""
    result = walk(script(f"export default {{ {declaration} }}"))
    assert result.of("data") == [
        DataEntry(
            name=value,
            description="ID data",
            type=type_name,
            initial_value=initial,
        )
    ]


def test_data_function_locals(walk: Walk) -> None:
    """Verify data values resolve through the locals of the data function."""
    body = """
    export default {
      data () {
        const pointer = 'pointed value'
        return {
          pointer,
          other: pointer,
          date: Date.now(),
          /** @type Date */
          created: null
        }
      }
    }
    """
    data = walk(script(body)).of("data")
    assert [(d.name, d.type, d.initial_value) for d in data] == [
        ("pointer", "string", '"pointed value"'),
        ("other", "string", '"pointed value"'),
        ("date", "unknown", "Date.now()"),
        ("created", "Date", "null"),
    ]


# -----------------------------
# Computed
# -----------------------------


def test_computed_dependencies(walk: Walk) -> None:
    """Verify dependencies of plain and getter computed properties."""
    body = """
    export default {
      computed: {
        /**
          * ID computed prop
          *
          * @private
          */
        id () {
          const value = this.value
          return this.name + value
        },
        /**
          * ID computed prop
          */
        idGetter: {
          get () {
            const value = this.value
            return this.name + value
          }
        },
        total: (vm) => vm.price * vm.quantity,
        pair () {
          const { first, second: other } = this
          return first + other + this.first
        }
      }
    }
    """
    result = walk(script(body), ignored_visibilities=["protected"])
    computed = result.of("computed")
    assert computed[0] == ComputedEntry(
        name="id",
        description="ID computed prop",
        visibility="private",
        dependencies=["value", "name"],
    )
    assert computed[1] == ComputedEntry(
        name="idGetter",
        description="ID computed prop",
        dependencies=["value", "name"],
    )
    assert computed[2].dependencies == ["price", "quantity"]
    assert computed[3].dependencies == ["first", "second"]


def test_computed_without_getter(walk: Walk) -> None:
    """Verify descriptor functions other than get are ignored."""
    body = """
    export default {
      computed: {
        idGetter: {
          foo () {
            return this.name
          }
        }
      }
    }
    """
    assert walk(script(body)).first("computed").dependencies == []


def test_computed_types(walk: Walk) -> None:
    """Verify computed types from tags and return annotations."""
    body = """
    export default {
      computed: {
        fullName (): string {
          return this.first
        },
        /** @type Number */
        count () {
          return 1
        }
      }
    }
    """
    result = walk(f'<script lang="ts">{body}</script>')
    assert [(c.name, c.type) for c in result.of("computed")] == [
        ("fullName", "string"),
        ("count", "number"),
    ]


# -----------------------------
# Methods
# -----------------------------


def test_method_params(walk: Walk) -> None:
    """Verify declared parameters of an arrow method."""
    body = "export default { methods: { getValue: (ctx) => {} } }"
    assert walk(script(body)).first("method") == MethodEntry(
        name="getValue",
        params=[Parameter("ctx")],
        syntax=["getValue(ctx: unknown): void"],
    )


def test_method_documented_params(walk: Walk) -> None:
    """Verify parameter properties follow their owner parameter."""
    body = """
    export default {
      methods: {
        /**
         * Assign the project to an employee.
         * @param {Object} employee - The employee.
         * @param {string} employee.name - The name of the employee.
         * @param {Object[]} employee.teams - The teams.
         */
        assign (employee) {}
      }
    }
    """
    method = walk(script(body)).first("method")
    assert method.description == "Assign the project to an employee."
    assert method.params == [
        Parameter("employee", "object", "The employee."),
        Parameter("employee.name", "string", "The name of the employee."),
        Parameter("employee.teams", "object[]", "The teams."),
    ]
    assert method.syntax == ["assign(employee: object): void"]


def test_method_optional_param_with_default(walk: Walk) -> None:
    """Verify an optional documented parameter with a default value."""
    body = """
    export default {
      methods: {
        /**
         * @param {string} [somebody=John Doe] - Somebody's name.
         */
        sayHello (somebody) {}
      }
    }
    """
    method = walk(script(body)).first("method")
    assert method.description is None
    assert method.params == [
        Parameter(
            "somebody",
            "string",
            "Somebody's name.",
            default_value="John Doe",
            optional=True,
        )
    ]


@pytest.mark.parametrize("tag", ["return", "returns"])
def test_method_returns(walk: Walk, tag: str) -> None:
    """Verify documented return values."""
    body = f"""
    export default {{
      methods: {{
        /**
         * Get the x value.
         * @{tag} {{number}} The x value.
         */
        getX () {{}}
      }}
    }}
    """
    method = walk(script(body)).first("method")
    assert method.returns == ReturnValue("number", "The x value.")
    assert method.syntax == ["getX(): number"]


def test_typescript_method(walk: Walk) -> None:
    """Verify annotated parameters and return types."""
    body = "export default { methods: { sum (a: number, b = 1): number {} } }"
    method = walk(f'<script lang="ts">{body}</script>').first("method")
    assert method.params == [
        Parameter("a", "number"),
        Parameter("b", "number", default_value="1"),
    ]
    assert method.returns == ReturnValue("number")
    assert method.syntax == ["sum(a: number, b: number = 1): number"]


def test_method_alias_and_syntax_tag(walk: Walk) -> None:
    """Verify aliased methods and explicit signatures."""
    body = """
    const helper = function (x) {}
    export default {
      methods: {
        helper,
        /**
         * @syntax format(value)
         */
        format: (value) => value,
        notAFunction: 12
      }
    }
    """
    methods = walk(script(body)).of("method")
    assert [(m.name, m.params, m.syntax) for m in methods] == [
        ("helper", [Parameter("x")], ["helper(x: unknown): void"]),
        ("format", [Parameter("value")], ["format(value)"]),
    ]


# -----------------------------
# Script events
# -----------------------------


def events(walk: Walk, body: str, **options: object) -> list[EventEntry]:
    """Walk a logic section and return its event entries."""
    return walk(script(body), **options).of("event")


def test_event_without_description(walk: Walk) -> None:
    """Verify an undocumented emission."""
    body = "export default { mounted: () => { this.$emit('loading', true) } }"
    assert events(walk, body) == [
        EventEntry(name="loading", arguments=[Parameter("true", "boolean")])
    ]


def test_event_with_description_and_visibility(walk: Walk) -> None:
    """Verify the comment preceding an emission documents the event."""
    body = """
    export default {
      created: () => {
        /**
         * loading event
         *
         * @protected
         */
        this.$emit('loading', true)
      }
    }
    """
    [event] = events(walk, body, ignored_visibilities=["private"])
    assert event.description == "loading event"
    assert event.visibility == "protected"
    assert event.keywords == []
    assert events(walk, body) == []


def test_event_tag_overrides_name(walk: Walk) -> None:
    """Verify @event replaces the call-derived name without a warning."""
    body = """
    export default {
      created () {
        /**
         * Event description
         *
         * @event loading
         */
        this.$emit(name, true)
      }
    }
    """
    result = walk(script(body))
    assert result.first("event").name == "loading"
    assert result.first("event").description == "Event description"
    assert result.warnings == ()


@pytest.mark.parametrize(
    "body",
    [
        """
        export default {
          beforeRouteEnter: (to, from, next) => {
            const name = 'loading'
            this.$emit(name, true)
          }
        }
        """,
        """
        export default {
          mounted: () => {
            const pname = 'loading'
            const value = true
            const name = pname
            this.$emit(name, true)
          }
        }
        """,
        """
        const ppname = 'loading'

        export default {
          created: () => {
            const pname = ppname
            const name = pname
            this.$emit(name, true)
          }
        }
        """,
        """
        const EVENTS = { LOADING: 'loading' }
        export default {
          created () {
            this.$emit(EVENTS.LOADING)
          }
        }
        """,
        """
        export default {
          created () {
            this.$emit('load' + 'ing')
          }
        }
        """,
    ],
)
def test_event_name_resolution(walk: Walk, body: str) -> None:
    """Verify event names resolve through aliases, members and operators."""
    result = walk(script(body))
    assert [e.name for e in result.of("event")] == ["loading"]
    assert result.warnings == ()


def test_unresolved_event_name(walk: Walk) -> None:
    """Verify an unresolved name falls back to the identifier and warns."""
    body = """
    export default {
      created: () => {
        const pname = ppname
        const name = pname
        /**
          * loading event
          */
        this.$emit(name, true)
      }
    }
    """
    result = walk(script(body))
    assert result.first("event").name == "ppname"
    assert result.first("event").description == "loading event"
    assert result.warnings == ("Unable to resolve event name 'name', using 'ppname'",)


def test_event_documented_arguments(walk: Walk) -> None:
    """Verify @param tags describe the event arguments."""
    body = """
    export default {
      methods: {
        getX (x) {
          /**
           * Emit the x value.
           * @param {number} x - The x value.
           */
          this.$emit('input', x)
        }
      }
    }
    """
    event = walk(script(body)).first("event")
    assert event.description == "Emit the x value."
    assert event.arguments == [Parameter("x", "number", "The x value.")]


def test_events_are_deduplicated(walk: Walk) -> None:
    """Verify one entry per event name across hooks."""
    body = """
    export default {
      created () {
        this.$emit('loading')
      },
      mounted: () => {
        this.$emit('loading', true)
      }
    }
    """
    assert events(walk, body) == [EventEntry(name="loading")]


def test_malformed_emission_is_ignored(walk: Walk) -> None:
    """Verify a bare $emit reference produces nothing."""
    body = """
    export default {
      created: () => {
        this.$emit
        this.$emit()
      }
    }
    """
    result = walk(script(body))
    assert result.of("event") == []
    assert result.warnings == ()


def test_events_disabled(walk: Walk) -> None:
    """Verify events are not scanned without their feature."""
    body = """
    export default {
      created: () => { this.$emit('loading') },
      mounted: () => { this.$emit('loading', true) }
    }
    """
    assert "event" not in walk(script(body), features=["name"]).channels


def test_events_in_callbacks(walk: Walk) -> None:
    """Verify emissions nested in callbacks, functions and expressions."""
    body = """
    export default {
      methods: {
        run (ok) {
          this.items.forEach(item => this.$emit('each', item))
          fetch().then(() => this.$emit('loaded'))
          ok ? this.$emit('yes') : this.$emit('no')
          function notify () {
            this.$emit('inner')
          }
          notify()
          const handler = () => this.$emit('assigned')
          return this.$emit('returned')
        }
      }
    }
    """
    assert [e.name for e in events(walk, body)] == [
        "each",
        "loaded",
        "yes",
        "no",
        "inner",
        "assigned",
        "returned",
    ]


def test_navigation_guard_event(walk: Walk) -> None:
    """Verify guard continuations are scanned with their own comments."""
    body = """
    export default {
      beforeRouteUpdate (to, from, next) {
        next((vm) => {
          /**
           * beforeRouteUpdate event description
           */
          vm.$emit('beforeRouteUpdate-event', this.value)
        })
      }
    }
    """
    assert events(walk, body) == [
        EventEntry(
            name="beforeRouteUpdate-event",
            description="beforeRouteUpdate event description",
            arguments=[Parameter("this.value")],
        )
    ]


def test_hidden_event_name_is_consumed(walk: Walk) -> None:
    """Verify a hidden event still counts as emitted."""
    body = """
    export default {
      created () {
        /** @private */
        this.$emit('secret')
      },
      mounted () {
        this.$emit('secret')
      }
    }
    """
    assert events(walk, body) == []


# -----------------------------
# Template
# -----------------------------


def test_default_slot(walk: Walk) -> None:
    """Verify an unnamed slot is the default slot."""
    result = walk(template("<slot/>"), filename=FILENAME)
    assert result.first("slot") == SlotEntry(name="default")


def test_slot_adjacent_comment(walk: Walk) -> None:
    """Verify only the comment adjacent to a slot describes it."""
    markup = """
      <div>
        <!-- a comment -->
        <p>Hello</p>
        <!-- this comment will be ignored -->
        <!-- default slot -->
        <slot/>
        <!-- detached -->
        <p>Hello</p>
        <slot name="other"/>
      </div>
    """
    result = walk(template(markup), filename=FILENAME)
    assert [(s.name, s.description) for s in result.of("slot")] == [
        ("default", "default slot"),
        ("other", None),
    ]
    assert "slot" not in walk(template(markup), features=["name"]).channels


def test_slot_props(walk: Walk) -> None:
    """Verify bound slot attributes merge with documented props."""
    markup = """
      <ul>
        <li v-for="(item, i) in items">
          <!--
            Item slot
            @prop {Object} item - The item
            @prop {string} extra - Documented only
          -->
          <slot name="item" :item="item" v-bind:index="i"></slot>
        </li>
      </ul>
    """
    assert walk(template(markup)).first("slot") == SlotEntry(
        name="item",
        description="Item slot",
        props=[
            Parameter("item", "object", "The item"),
            Parameter("index"),
            Parameter("extra", "string", "Documented only"),
        ],
    )


def test_documented_slots(walk: Walk) -> None:
    """Verify @slot tags add slots missing from the template."""
    source = (
        template("<div><slot/></div>")
        + script(
            "/**\n * @slot default - Ignored\n * @slot footer - Footer content\n */"
            "\nexport default {}"
        )
    )
    assert walk(source).of("slot") == [
        SlotEntry(name="default"),
        SlotEntry(name="footer", description="Footer content"),
    ]


@pytest.mark.parametrize("directive", ["v-on:input", "@input"])
def test_template_event(walk: Walk, directive: str) -> None:
    """Verify directive-bound emissions with their element comment."""
    markup = f"""
      <div>
        <!--
          Emit the input event

          @protected
          @value A input value
        -->
        <input
          type="text"
          {directive}="$emit('input', $event)"/>
      </div>
    """
    result = walk(
        template(markup),
        filename=FILENAME,
        features=["events"],
        ignored_visibilities=["private"],
    )
    assert result.of("event") == [
        EventEntry(
            name="input",
            description="Emit the input event",
            visibility="protected",
            keywords=[Keyword("value", "A input value")],
        )
    ]


def test_template_event_visibility_only(walk: Walk) -> None:
    """Verify a comment with only a visibility tag."""
    markup = """
      <div>
        <!-- @private -->
        <input type="text" v-on:input="$emit('input', $event)"/>
      </div>
    """
    result = walk(
        template(markup), features=["events"], ignored_visibilities=["protected"]
    )
    assert result.of("event") == [EventEntry(name="input", visibility="private")]


def test_directives_share_element_comment(walk: Walk) -> None:
    """Verify every directive of one element shares its comment."""
    markup = """
      <div>
        <!--
          Emit the input event

          @protected
          @value A input value
        -->
        <input
          type="text"
          @input="$emit('input', $event)"
          v-on:change="$emit('change', $event)"/>
      </div>
    """
    result = walk(template(markup), ignored_visibilities=["private"])

    def documented(name: str) -> EventEntry:
        return EventEntry(
            name=name,
            description="Emit the input event",
            visibility="protected",
            keywords=[Keyword("value", "A input value")],
        )

    assert result.of("event") == [documented("input"), documented("change")]


def test_template_event_name_fallback(walk: Walk) -> None:
    """Verify unresolved and overridden template event names."""
    markup = """
      <div>
        <button @click="$emit(eventName)">A</button>
        <!-- @event renamed -->
        <button @click="$emit(other)">B</button>
        <button @click="select()">C</button>
      </div>
    """
    result = walk(template(markup))
    assert [e.name for e in result.of("event")] == ["eventName", "renamed"]
    assert result.warnings == (
        "Unable to resolve template event name 'eventName'",
        "Unable to resolve template event name 'other'",
    )


def test_template_and_script_events_deduplicated(walk: Walk) -> None:
    """Verify an event emitted from script and template is reported once."""
    source = script(
        "export default { methods: { save () { this.$emit('save') } } }"
    ) + template("<button @click=\"$emit('save')\">Save</button>")
    assert [e.name for e in walk(source).of("event")] == ["save"]


@pytest.mark.parametrize(
    ("statement", "expected"),
    [
        (
            "return new Promise((resolve) => { this.$emit('loaded'); resolve() })",
            "loaded",
        ),
        ("const handlers = { onClick: () => this.$emit('clicked') }", "clicked"),
        ("const handlers = { onClick () { this.$emit('clicked') } }", "clicked"),
        ("(() => { this.$emit('invoked') })()", "invoked"),
        ("const label = `${this.$emit('rendered')}`", "rendered"),
        ("const list = [...this.$emit('spread')]", "spread"),
        ("const all = { ...this.$emit('merged') }", "merged"),
        ("while (this.$emit('loop-cond')) {}", "loop-cond"),
        ("do {} while (this.$emit('do-cond'))", "do-cond"),
        ("for (let i = 0; this.$emit('for-cond'); i++) {}", "for-cond"),
        ("for (let i = 0; i < 1; this.$emit('for-step')) {}", "for-step"),
        ("for (const item of this.$emit('for-of-right')) {}", "for-of-right"),
        ("for (const key in this.$emit('for-in-right')) {}", "for-in-right"),
        ("if (ok) { items.map(item => ({ run: () => this.$emit('deep') })) }", "deep"),
    ],
)
def test_events_in_nested_expressions(
    walk: Walk, statement: str, expected: str
) -> None:
    """Verify emissions are found at any depth of an expression."""
    body = f"export default {{ methods: {{ run (ok) {{ {statement} }} }} }}"
    assert [e.name for e in events(walk, body)] == [expected]


def test_event_name_after_compound_assignment(walk: Walk) -> None:
    """Verify the last write to an event name variable is used."""
    body = """
    export default {
      methods: {
        run () {
          let name = 'a'
          name += '-b'
          this.$emit(name)
          let other = 'c'
          other += suffix
          this.$emit(other)
        }
      }
    }
    """
    result = walk(script(body))
    assert [e.name for e in result.of("event")] == ["a-b", "other"]
    assert result.warnings == (
        "Unable to resolve event name 'other', using 'other'",
    )


def test_slot_camel_case_prop(walk: Walk) -> None:
    """Verify a camelCase bound prop matches its documented spelling."""
    markup = """
      <div>
        <!--
          @prop {number} itemCount - Number of items
        -->
        <slot :itemCount="count"></slot>
      </div>
    """
    assert walk(template(markup)).first("slot").props == [
        Parameter("itemCount", "number", "Number of items")
    ]
