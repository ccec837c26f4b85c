"""GraphQL documents for the Linear API, kept together so they are easy to audit."""

# --- Mutations ------------------------------------------------------------- #

CREATE_ISSUE_MUTATION = """
mutation CreateIssue($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue {
      id
      identifier
      title
      url
      team { id name key }
      project { id name }
    }
  }
}
"""

CREATE_ISSUES_MUTATION = """
mutation CreateIssues($input: IssueBatchCreateInput!) {
  issueBatchCreate(input: $input) {
    success
    issues {
      id
      identifier
      title
      url
      team { id name key }
      project { id name }
    }
  }
}
"""

CREATE_PROJECT_MUTATION = """
mutation CreateProject($input: ProjectCreateInput!) {
  projectCreate(input: $input) {
    success
    lastSyncId
    project {
      id
      name
      url
    }
  }
}
"""

UPDATE_ISSUES_MUTATION = """
mutation UpdateIssues($ids: [UUID!]!, $input: IssueUpdateInput!) {
  issueBatchUpdate(ids: $ids, input: $input) {
    success
    issues {
      id
      identifier
      title
      url
      state { name }
    }
  }
}
"""

DELETE_ISSUES_MUTATION = """
mutation DeleteIssues($ids: [UUID!]!) {
  issueBatchDelete(ids: $ids) {
    success
  }
}
"""

CREATE_ISSUE_LABELS_MUTATION = """
mutation CreateIssueLabels($labels: [IssueLabelCreateInput!]!) {
  issueLabelCreate(input: $labels) {
    success
    issueLabels {
      id
      name
      color
    }
  }
}
"""

CREATE_COMMENT_MUTATION = """
mutation CreateComment($input: CommentCreateInput!) {
  commentCreate(input: $input) {
    success
    comment {
      id
      body
      createdAt
      user { id name email }
      issue { id identifier }
      parent { id }
    }
  }
}
"""

UPDATE_COMMENT_MUTATION = """
mutation UpdateComment($id: String!, $input: CommentUpdateInput!) {
  commentUpdate(id: $id, input: $input) {
    success
    comment {
      id
      body
      editedAt
      user { id name email }
    }
  }
}
"""

DELETE_COMMENT_MUTATION = """
mutation DeleteComment($id: String!) {
  commentDelete(id: $id) {
    success
  }
}
"""

# --- Queries --------------------------------------------------------------- #

SEARCH_ISSUES_QUERY = """
query SearchIssues(
  $filter: IssueFilter
  $first: Int
  $after: String
  $orderBy: PaginationOrderBy
) {
  issues(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {
    pageInfo {
      hasNextPage
      endCursor
    }
    nodes {
      id
      identifier
      title
      description
      url
      priority
      state { id name type color }
      assignee { id name email }
      team { id name key }
      project { id name }
    }
  }
}
"""

GET_TEAMS_QUERY = """
query GetTeams {
  teams {
    nodes {
      id
      name
      key
      description
      states { nodes { id name type color } }
      labels { nodes { id name color } }
    }
  }
}
"""

GET_VIEWER_QUERY = """
query GetViewer {
  viewer {
    id
    name
    email
    teams { nodes { id name key } }
  }
}
"""

GET_PROJECT_QUERY = """
query GetProject($id: String!) {
  project(id: $id) {
    id
    name
    description
    url
    teams { nodes { id name } }
  }
}
"""

SEARCH_PROJECTS_QUERY = """
query SearchProjects($filter: ProjectFilter) {
  projects(filter: $filter) {
    nodes {
      id
      name
      description
      url
      teams { nodes { id name } }
    }
  }
}
"""

GET_COMMENTS_QUERY = """
query GetComments(
  $filter: CommentFilter
  $first: Int
  $after: String
  $orderBy: PaginationOrderBy
) {
  comments(filter: $filter, first: $first, after: $after, orderBy: $orderBy) {
    pageInfo {
      hasNextPage
      endCursor
    }
    nodes {
      id
      body
      createdAt
      updatedAt
      editedAt
      user { id name email }
      issue { id identifier }
      parent { id }
    }
  }
}
"""
