"""Shared test fixtures — sample diffs, a Cypress project tree, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_diff_modified() -> str:
    """A unified diff that edits one file in place."""
    return textwrap.dedent("""\
        diff --git a/src/components/Button.tsx b/src/components/Button.tsx
        index 1234567..abcdef0 100644
        --- a/src/components/Button.tsx
        +++ b/src/components/Button.tsx
        @@ -1,3 +1,3 @@
         import React from "react";
        -export const Button = () => <button />;
        +export const Button = () => <button type="button" />;
         export default Button;
    """)


@pytest.fixture
def sample_diff_new_file() -> str:
    return textwrap.dedent("""\
        diff --git a/src/pages/Cart.tsx b/src/pages/Cart.tsx
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/src/pages/Cart.tsx
        @@ -0,0 +1,2 @@
        +export const Cart = () => null;
        +export default Cart;
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    return textwrap.dedent("""\
        diff --git a/src/legacy/Banner.tsx b/src/legacy/Banner.tsx
        deleted file mode 100644
        index abc1234..0000000
        --- a/src/legacy/Banner.tsx
        +++ /dev/null
        @@ -1,2 +0,0 @@
        -export const Banner = () => null;
        -export default Banner;
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A diff with a renamed file."""
    return textwrap.dedent("""\
        diff --git a/src/auth/Login.tsx b/src/auth/SignIn.tsx
        similarity index 92%
        rename from src/auth/Login.tsx
        rename to src/auth/SignIn.tsx
        index abc1234..def5678 100644
        --- a/src/auth/Login.tsx
        +++ b/src/auth/SignIn.tsx
        @@ -1,1 +1,1 @@
        -export const Login = () => null;
        +export const SignIn = () => null;
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/public/logo.png b/public/logo.png
        new file mode 100644
        Binary files /dev/null and b/public/logo.png differ
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only file mode change."""
    return textwrap.dedent("""\
        diff --git a/scripts/build.sh b/scripts/build.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_multi() -> str:
    """Several files in one diff, including hunk lines that look like headers."""
    return textwrap.dedent("""\
        diff --git a/README.md b/README.md
        index 1111111..2222222 100644
        --- a/README.md
        +++ b/README.md
        @@ -1,3 +1,3 @@
         # Title
        --- a/fake/header.ts
        ++++ b/fake/header.ts
         footer
        diff --git a/src/api/client.ts b/src/api/client.ts
        index 3333333..4444444 100644
        --- a/src/api/client.ts
        +++ b/src/api/client.ts
        @@ -10,2 +10,2 @@ export function request() {
        -  return fetch(url);
        +  return fetch(url, options);
           // end
        \\ No newline at end of file
    """)


@pytest.fixture
def sample_name_status() -> str:
    return textwrap.dedent("""\
        A\tsrc/new.ts
        M\tsrc/modified.ts
        D\tsrc/removed.ts
        R087\tsrc/old-name.ts\tsrc/new-name.ts
        C075\tsrc/base.ts\tsrc/copy.ts
        T\tsrc/link.ts
    """)


# --- Cypress project tree ---

BUTTON_SPEC = textwrap.dedent("""\
    import { Button } from "../../../src/components/Button";

    describe("Button component", () => {
      it("renders a label", () => {
        cy.mount(Button);
      });
    });
""")

LOGIN_SPEC = textwrap.dedent("""\
    // @tags: auth, login
    describe("[smoke] Login page", () => {
      it("shows an error", { tags: ["errors"] }, () => {
        cy.visit("/login");
      });
    });
""")

CHECKOUT_SPEC = textwrap.dedent("""\
    const { totals } = require("../../../src/utils");

    context("Checkout summary", () => {
      specify("computes totals", () => {});
    });
""")


def build_cypress_project(root: Path) -> Path:
    """Lay out a small app with three Cypress specs and some decoys."""
    files = {
        "src/components/Button.tsx": "export const Button = () => null;\n",
        "src/pages/Login.tsx": "export const Login = () => null;\n",
        "src/utils/index.ts": "export const totals = () => 0;\n",
        "cypress/e2e/components/button.spec.ts": BUTTON_SPEC,
        "cypress/e2e/auth/login.cy.ts": LOGIN_SPEC,
        "cypress/e2e/checkout/checkout.test.js": CHECKOUT_SPEC,
        "cypress/e2e/dist/built.cy.ts": "describe('built', () => {});\n",
        "cypress/support/commands.ts": "export {};\n",
        "node_modules/vendor/cypress/e2e/vendored.spec.ts": "describe('vendored', () => {});\n",
    }
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def cypress_project(tmp_path: Path) -> Path:
    """A Cypress project tree outside any git repository."""
    return build_cypress_project(tmp_path)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path


@pytest.fixture
def cypress_git_repo(tmp_git_repo: Path) -> Path:
    """The Cypress project tree, committed in a git repository."""
    build_cypress_project(tmp_git_repo)
    subprocess.run(["git", "add", "."], cwd=tmp_git_repo, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "project"],
        cwd=tmp_git_repo, capture_output=True, check=True,
    )
    return tmp_git_repo
