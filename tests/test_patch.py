"""
Tests for committing collected patches to the tree.
"""
import pytest

from fakes import ctx_param, func, go_file, stmt_texts
from goinstrument.errors import PatchError
from goinstrument.nodes import BlockStmt, RawStmt
from goinstrument.patch import Patch, apply_patches


def patch_for(fn, *texts, name=""):
    return Patch(body=fn.body, stmts=[RawStmt(t) for t in texts], span_name=name)


class TestApplyPatches:

    def test_empty_patch_list_is_noop(self):
        fn = func("Do", params=[ctx_param()])
        file = go_file("svc", fn)
        apply_patches(file, [])
        assert stmt_texts(fn.body) == ["return nil"]
        assert fn.body.dirty is False

    def test_statements_prepended_in_order(self):
        fn = func("Do", body=BlockStmt([RawStmt("a()"), RawStmt("return nil")]))
        apply_patches(go_file("svc", fn), [patch_for(fn, "one()", "two()", "three()")])
        assert stmt_texts(fn.body) == ["one()", "two()", "three()", "a()", "return nil"]
        assert fn.body.dirty is True

    def test_multiple_patches_each_hit_their_own_body(self):
        fns = [func(name) for name in ("A", "B", "C")]
        file = go_file("svc", *fns)
        # application order must not matter
        patches = [patch_for(fns[2], "c()"), patch_for(fns[0], "a()"), patch_for(fns[1], "b()")]

        apply_patches(file, patches)

        assert stmt_texts(fns[0].body) == ["a()", "return nil"]
        assert stmt_texts(fns[1].body) == ["b()", "return nil"]
        assert stmt_texts(fns[2].body) == ["c()", "return nil"]

    def test_empty_body(self):
        fn = func("Do", body=BlockStmt())
        apply_patches(go_file("svc", fn), [patch_for(fn, "x()")])
        assert stmt_texts(fn.body) == ["x()"]

    def test_missing_target_leaves_tree_untouched(self):
        inside = func("Inside")
        outside = func("Outside")
        file = go_file("svc", inside)
        patches = [patch_for(inside, "in()", name="svc.Inside"),
                   patch_for(outside, "out()", name="svc.Outside")]

        with pytest.raises(PatchError, match="svc.Outside"):
            apply_patches(file, patches)

        assert stmt_texts(inside.body) == ["return nil"]
        assert inside.body.dirty is False

    def test_two_patches_for_one_body_rejected(self):
        fn = func("Do")
        file = go_file("svc", fn)
        with pytest.raises(PatchError):
            apply_patches(file, [patch_for(fn, "a()"), patch_for(fn, "b()")])
        assert stmt_texts(fn.body) == ["return nil"]
