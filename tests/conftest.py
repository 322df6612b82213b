"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path

import pytest


USERS_MAIN_API = """\
import * as runtime from '../runtime';
import type { UserAnalyticsResponseModel } from '../models/index';

export interface UsersGetAnalyticsRequest {
    userId?: string;
}

export class UsersMainApi extends runtime.BaseAPI {

    /**
     * Get analytics for a user
     */
    async usersGetAnalyticsRaw(requestParameters: UsersGetAnalyticsRequest, initOverrides?: RequestInit | runtime.InitOverrideFunction): Promise<runtime.ApiResponse<UserAnalyticsResponseModel>> {
        const response = await this.request({ path: `/users/analytics`, method: 'GET' }, initOverrides);
        return new runtime.JSONApiResponse(response);
    }

    async usersGetAnalytics(requestParameters: UsersGetAnalyticsRequest = {}, initOverrides?: RequestInit | runtime.InitOverrideFunction): Promise<UserAnalyticsResponseModel> {
        const response = await this.usersGetAnalyticsRaw(requestParameters, initOverrides);
        return await response.value();
    }
}
"""

QUESTIONS_API = """\
export class QuestionsApi {
    async questionsGetAll(): Promise<Array<QuestionResponseModel>> {
        return [];
    }
}
"""

USERS_WRAPPER = """\
import { BaseClient } from './shared';
import { UserAnalyticsResponseModel } from '../generated/models/UserAnalyticsResponseModel';

export class UserClient extends BaseClient {
    async fetchUserAnalytics(userId: string): Promise<UserAnalyticsResponseModel> {
        return this.api.usersGetAnalytics({ userId });
    }
}
"""

QUESTIONS_WRAPPER = """\
import { BaseClient } from './shared/base';
import { Question, NewQuestion } from './shared/types';

export class QuestionClient extends BaseClient {
    async fetchQuestions(): Promise<Question[]> {
        return [];
    }

    async submitQuestion(question: NewQuestion): Promise<Question> {
        return question as Question;
    }
}
"""


@pytest.fixture
def users_main_api() -> str:
    """Source of a generated API class."""
    return USERS_MAIN_API


@pytest.fixture
def users_wrapper() -> str:
    """A wrapper importing one generated model."""
    return USERS_WRAPPER


@pytest.fixture
def questions_wrapper() -> str:
    """A wrapper importing nothing from generated code."""
    return QUESTIONS_WRAPPER


@pytest.fixture
def generated_files() -> dict[str, str]:
    """Snapshot of the generated client keyed by path."""
    return {
        "apis/UsersMainApi.ts": USERS_MAIN_API,
        "apis/QuestionsApi.ts": QUESTIONS_API,
        "models/UserAnalyticsResponseModel.ts": "export interface UserAnalyticsResponseModel {}\n",
    }


@pytest.fixture
def wrapper_files() -> dict[str, str]:
    """Snapshot of the wrapper layer keyed by path."""
    return {
        "users.ts": USERS_WRAPPER,
        "questions.ts": QUESTIONS_WRAPPER,
    }


@pytest.fixture
def simple_diff_content() -> str:
    """A diff modifying one generated model."""
    lines = [
        "diff --git a/src/generated/models/UserAnalyticsResponseModel.ts b/src/generated/models/UserAnalyticsResponseModel.ts",
        "index 1234567..abcdefg 100644",
        "--- a/src/generated/models/UserAnalyticsResponseModel.ts",
        "+++ b/src/generated/models/UserAnalyticsResponseModel.ts",
        "@@ -10,6 +10,8 @@ export interface UserAnalyticsResponseModel {",
        "     userId: string;",
        "     totalQuestions: number;",
        "     totalAnswers: number;",
        "+    reputation: number;",
        "+    badges?: Array<string>;",
        " }",
        " ",
        " export function UserAnalyticsResponseModelFromJSON(json: any): UserAnalyticsResponseModel {",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def new_file_diff_content() -> str:
    """A diff adding a 40-line generated API file."""
    lines = [
        "diff --git a/apis/UsersMainApi.ts b/apis/UsersMainApi.ts",
        "new file mode 100644",
        "index 0000000..1111111",
        "--- /dev/null",
        "+++ b/apis/UsersMainApi.ts",
        "@@ -0,0 +1,40 @@",
    ]
    lines.extend(f"+// generated line {i}" for i in range(1, 41))
    return "\n".join(lines) + "\n"


@pytest.fixture
def multi_file_diff_content() -> str:
    """A diff with a modified, a deleted and a renamed generated file."""
    # Context lines start with exactly one space, the diff marker
    lines = [
        "diff --git a/src/generated/apis/UsersMainApi.ts b/src/generated/apis/UsersMainApi.ts",
        "index 1111111..2222222 100644",
        "--- a/src/generated/apis/UsersMainApi.ts",
        "+++ b/src/generated/apis/UsersMainApi.ts",
        "@@ -20,4 +20,5 @@ export class UsersMainApi extends runtime.BaseAPI {",
        " " + "    async usersGetAnalytics(): Promise<UserAnalyticsResponseModel> {",
        "-" + "        return await response.value();",
        "+" + "        const value = await response.value();",
        "+" + "        return value;",
        " " + "    }",
        " " + "}",
        "diff --git a/src/generated/apis/LegacyApi.ts b/src/generated/apis/LegacyApi.ts",
        "deleted file mode 100644",
        "index 3333333..0000000",
        "--- a/src/generated/apis/LegacyApi.ts",
        "+++ /dev/null",
        "@@ -1,3 +0,0 @@",
        "-export class LegacyApi {",
        "-    async ping(): Promise<void> {}",
        "-}",
        "diff --git a/src/generated/models/OldName.ts b/src/generated/models/NewName.ts",
        "similarity index 90%",
        "rename from src/generated/models/OldName.ts",
        "rename to src/generated/models/NewName.ts",
        "index 4444444..5555555 100644",
        "--- a/src/generated/models/OldName.ts",
        "+++ b/src/generated/models/NewName.ts",
        "@@ -1,2 +1,2 @@",
        "-export interface OldName {",
        "+export interface NewName {",
        " " + "    id: string;",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def orphan_hunk_diff_content() -> str:
    """A hunk with no file header, followed by a well-formed file."""
    lines = [
        "@@ -1,2 +1,3 @@",
        " line one",
        "+added line",
        " line two",
        "diff --git a/src/generated/models/Tag.ts b/src/generated/models/Tag.ts",
        "index 6666666..7777777 100644",
        "--- a/src/generated/models/Tag.ts",
        "+++ b/src/generated/models/Tag.ts",
        "@@ -1,1 +1,2 @@",
        " export interface Tag {",
        "+    name: string;",
    ]
    return "\n".join(lines) + "\n"


@pytest.fixture
def sdk_project(tmp_path: Path, generated_files: dict[str, str], wrapper_files: dict[str, str]) -> Path:
    """A project tree with src/generated and src/client populated."""
    generated_root = tmp_path / "src" / "generated"
    client_root = tmp_path / "src" / "client"
    for relative, text in generated_files.items():
        path = generated_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    for relative, text in wrapper_files.items():
        path = client_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return tmp_path
