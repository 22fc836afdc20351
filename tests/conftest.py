"""
Shared fixtures for godecl tests.
"""

import textwrap

import pytest

from godecl.models.config import ParseOptions
from godecl.parser.go_parser import GoDeclParser


@pytest.fixture
def go_parser():
    """Create a Go declaration parser instance for testing"""
    return GoDeclParser()


@pytest.fixture
def parse(go_parser):
    """Parse dedented Go source, with option flags given as keywords"""
    def _parse(source: str, package_path: str = "", **options):
        parse_options = ParseOptions(**options) if options else None
        return go_parser.parse_source(textwrap.dedent(source), package_path, parse_options)
    return _parse


@pytest.fixture
def sample_go_code():
    """Go file touching every declaration category"""
    return textwrap.dedent('''\
        // Package store keeps values.
        package store

        import (
            "context"
            j "encoding/json"
        )

        // Limits
        const (
            MaxItems = 100
            Prefix   = "store:"
        )

        var (
            // ErrMissing is returned for unknown keys
            ErrMissing error
            defaultCtx = context.Background
        )

        // ID identifies a value.
        type ID int64

        // Getter fetches values
        type Getter interface {
            Get(keys []*string, fallback []*string) (int, error)
        }

        // Item is a stored value.
        type Item struct {
            ID    ID              `json:"id"`
            Value j.RawMessage    `json:"value,omitempty"`
        }

        // New creates a store.
        func New(ctx context.Context, items ...Item) (*Store, error) {
            return nil, nil
        }

        type Store struct {
            items map[ID]*Item
        }

        // Get implements Getter.
        func (s *Store) Get(keys []*string, fallback []*string) (int, error) {
            return 0, nil
        }

        func (i ID) String() string {
            return ""
        }
        ''')
