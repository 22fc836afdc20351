"""
Tests for the import table: alias construction and qualifier resolution.
"""

import pytest

from godecl.models.entities import ImportType, NameType
from godecl.parser.base import StructuralError, UnresolvedImportError
from godecl.parser.imports import construct_alias, package_name


class TestAliasHelpers:
    """Alias construction from import paths"""

    def test_construct_alias_uses_last_segment(self):
        assert construct_alias("github.com/pkg/errors") == "errors"
        assert construct_alias("fmt") == "fmt"

    def test_construct_alias_reserved_name(self):
        """Test implicit aliases never shadow predeclared identifiers"""
        assert construct_alias("example.com/types/string") == "_string"
        assert construct_alias("example.com/len") == "_len"

    def test_package_name_drops_version_suffix(self):
        assert package_name("gopkg.in/yaml.v3") == "yaml"
        assert package_name("github.com/jackc/pgx/v5") == "pgx"
        assert package_name("net/http") == "http"
        assert package_name("v2") == "v2"


class TestImportParsing:
    """Import declarations in the File model"""

    def test_single_and_grouped_imports(self, parse):
        file = parse('''
            package p

            import "fmt"

            import (
                // JSON support
                j "encoding/json"
                _ "embed"
                . "strings"
            )
            ''')

        assert [(i.alias, i.package) for i in file.imports] == [
            ("fmt", "fmt"),
            ("j", "encoding/json"),
            ("_", "embed"),
            (".", "strings"),
        ]
        assert file.imports[1].docs == ["// JSON support"]
        assert str(file.imports[1]) == 'j "encoding/json"'

    def test_raw_string_path(self, parse):
        file = parse('package p\nimport `net/url`\n')
        assert file.imports[0].package == "net/url"
        assert file.imports[0].alias == "url"

    def test_duplicate_alias(self, parse):
        with pytest.raises(StructuralError, match="not unique package alias: log"):
            parse('''
                package p

                import (
                    log "github.com/sirupsen/logrus"
                    log "log"
                )
                ''')

    def test_implicit_version_aliases_may_repeat(self, parse):
        file = parse('''
            package p

            import (
                "github.com/go-chi/chi/v5"
                "github.com/jackc/pgx/v5"
            )

            var r chi.Router
            var c *pgx.Conn
            ''')

        assert [i.alias for i in file.imports] == ["v5", "v5"]
        assert [str(v.type) for v in file.vars] == ["chi.Router", "*pgx.Conn"]
        assert file.vars[0].type.qualifier.package == "github.com/go-chi/chi/v5"
        assert file.vars[1].type.next.qualifier.package == "github.com/jackc/pgx/v5"

    def test_blank_imports_may_repeat(self, parse):
        file = parse('''
            package p

            import (
                _ "embed"
                _ "net/http/pprof"
            )
            ''')
        assert len(file.imports) == 2

    def test_reserved_alias_in_model(self, parse):
        file = parse('package p\nimport "example.com/types/string"\n')
        assert file.imports[0].alias == "_string"


class TestQualifierResolution:
    """Package qualifiers in type expressions"""

    def test_explicit_alias(self, parse):
        file = parse('''
            package p

            import j "encoding/json"

            var d *j.Decoder
            ''')

        target = file.vars[0].type.next
        assert isinstance(target, ImportType)
        assert target.alias == "j"
        assert target.qualifier.package == "encoding/json"
        assert target.next == NameType(name="Decoder")

    def test_gopkg_version_suffix(self, parse):
        file = parse('''
            package p

            import "gopkg.in/yaml.v3"

            var n yaml.Node
            ''')

        resolved = file.vars[0].type
        assert resolved.qualifier.package == "gopkg.in/yaml.v3"
        assert str(resolved) == "yaml.Node"

    def test_major_version_suffix(self, parse):
        file = parse('''
            package p

            import "github.com/jackc/pgx/v5"

            var c *pgx.Conn
            ''')
        assert file.vars[0].type.next.qualifier.package == "github.com/jackc/pgx/v5"

    def test_version_element_is_not_a_qualifier(self, parse):
        with pytest.raises(UnresolvedImportError, match="could not resolve package: v5"):
            parse('''
                package p

                import "github.com/jackc/pgx/v5"

                var c *v5.Conn
                ''')

    def test_unresolved_qualifier(self, parse):
        with pytest.raises(UnresolvedImportError, match="could not resolve package: time"):
            parse("package p\nvar t time.Time\n")

    def test_allow_any_alias(self, parse):
        """Test unknown qualifiers resolve to an absent import when allowed"""
        file = parse("package p\nvar t time.Time\n", allow_any_import_alias=True)

        resolved = file.vars[0].type
        assert isinstance(resolved, ImportType)
        assert resolved.alias == "time"
        assert resolved.qualifier is None
        assert str(resolved) == "time.Time"

    def test_own_package_qualifier_is_dropped(self, parse):
        file = parse('''
            package models

            import "example.com/app/models"

            var current *models.User
            ''', package_path="example.com/app/models")

        assert file.package_path == "example.com/app/models"
        assert str(file.vars[0].type) == "*User"
        assert file.vars[0].type.next == NameType(name="User")

