"""Generate a Maven project of JAXB-annotated Java classes.

One class is generated per element identity, plus a ``Main`` class that
unmarshals a document and prints it back, an optional ``package-info.java``
carrying the document element's namespace, and a ``pom.xml``. Everything is
rendered into a mapping of relative path to file contents; writing it to
disk is left to :func:`xml_schema_infer.writers.write_project` so that a
rendering failure never leaves a half-written project behind.

Layout (default configuration)::

        pom.xml
        src/main/java/io/xmlschemainfer/jaxb/Main.java
        src/main/java/io/xmlschemainfer/jaxb/xml/package-info.java
        src/main/java/io/xmlschemainfer/jaxb/xml/XRoot.java
        ...
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, List, Optional

from .config import InferenceConfig
from .emitters import FieldSpec, TreeVisitor
from .models import ElementNode, InferenceResult
from .naming import TypeNamer, clean_name, lower_first
from .rendering import render_template
from .type_sniffer import ScalarType

MAVEN_JAVA_BASE = "src/main/java"

JAVA_SCALAR_TYPES: Dict[ScalarType, str] = {
    ScalarType.BOOLEAN: "Boolean",
    ScalarType.INTEGER: "Long",
    ScalarType.DECIMAL: "Double",
    ScalarType.STRING: "String",
}

JAVA_KEYWORDS = frozenset(
    """
    abstract assert boolean break byte case catch char class const continue
    default do double else enum extends final finally float for goto if
    implements import instanceof int interface long native new package private
    protected public return short static strictfp super switch synchronized
    this throw throws transient try void volatile while true false null
    """.split()
)


def java_field_name(name: str) -> str:
    field = lower_first(clean_name(name))
    if field in JAVA_KEYWORDS:
        field += "_"
    return field


def _annotation(kind: str, name: str, space: str, package_space: str = "") -> str:
    # package-info.java makes the package namespace the default, so
    # unqualified names have to opt out of it explicitly.
    if space or package_space:
        return f'@{kind}(name = "{name}", namespace = "{space}")'
    return f'@{kind}(name = "{name}")'


class JavaJaxbVisitor(TreeVisitor):
    """Render one JAXB-annotated class per element identity.

    Attributes become ``@XmlAttribute`` fields, children ``@XmlElement``
    fields (``List<T>`` when the child repeats), and text on a leaf becomes
    an ``@XmlValue`` field. JAXB cannot bind ``@XmlValue`` next to child
    elements, so character data observed on a container is noted in a
    comment and left unbound.
    """

    def scalar_type(self, scalar: ScalarType) -> str:
        return JAVA_SCALAR_TYPES[scalar]

    def render_node(
        self, node: ElementNode, result: InferenceResult, namer: TypeNamer
    ) -> str:
        fields = self.fields_for(node, result, namer)
        return render_template(
            "jaxb_class.java.j2",
            package=f"{self.config.java_package}.xml",
            class_name=namer.type_name(node),
            root_annotation=_annotation(
                "XmlRootElement", node.name, node.space, result.first_node.space
            ),
            fields=fields,
            uses_list=any(f.type.startswith("List<") for f in fields),
            mixed=node.text_observed and node.has_children,
        )

    def fields_for(
        self, node: ElementNode, result: InferenceResult, namer: TypeNamer
    ) -> List[FieldSpec]:
        fields: List[FieldSpec] = []
        unique = self.field_namer()
        package_space = result.first_node.space

        for record in result.attributes_for(node):
            fields.append(
                FieldSpec(
                    name=unique(java_field_name(namer.attribute_field(record))),
                    type=self._type_of(record.scalar_type),
                    tag=_annotation(
                        "XmlAttribute", record.name, record.space, package_space
                    ),
                )
            )

        for child in node.children.values():
            type_name = namer.type_name(child)
            fields.append(
                FieldSpec(
                    name=unique(java_field_name(child.name)),
                    type=f"List<{type_name}>" if child.repeats else type_name,
                    tag=_annotation("XmlElement", child.name, child.space, package_space),
                )
            )

        if node.text_observed and not node.has_children:
            fields.append(
                FieldSpec(
                    name=unique("text"),
                    type=self._type_of(node.scalar_type),
                    tag="@XmlValue",
                )
            )
        return fields


def render_java_project(
    result: InferenceResult,
    config: Optional[InferenceConfig] = None,
    source_name: str = "",
) -> Dict[str, str]:
    """Render the whole Maven project as ``{relative path: contents}``.

    Paths use forward slashes and are relative to ``config.java_base_dir``.
    """
    config = config or InferenceConfig()
    namer = TypeNamer(config)
    package_dir = PurePosixPath(MAVEN_JAVA_BASE, *config.java_package.split("."))
    xml_dir = package_dir / "xml"

    files: Dict[str, str] = {}
    for node, text in JavaJaxbVisitor(config).render_all(result, namer):
        files[str(xml_dir / f"{namer.type_name(node)}.java")] = text

    root_class = namer.type_name(result.first_node)
    files[str(package_dir / "Main.java")] = render_template(
        "jaxb_main.java.j2",
        package=config.java_package,
        root_class=root_class,
        source_name=source_name,
    )

    if result.first_node.space:
        files[str(xml_dir / "package-info.java")] = render_template(
            "jaxb_package_info.java.j2",
            package=f"{config.java_package}.xml",
            namespace=result.first_node.space,
        )

    files["pom.xml"] = render_template(
        "maven_pom.xml.j2",
        group_id=config.java_base_package,
        app_name=config.java_app_name,
        main_class=f"{config.java_package}.Main",
    )
    return files
