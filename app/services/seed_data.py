"""Starter technical question bank.

Loaded by ``python -m app.seed`` and, in dev without a database, at app
startup.  Each entry: (category, difficulty, points, question, options,
correct option index, explanation).
"""

from __future__ import annotations

import logging
from collections import Counter

from app.models.question import ChoiceAnswer, Question
from app.repos.question_repo import QuestionRepo
from app.services import question_bank

logger = logging.getLogger(__name__)

SEED_AUTHOR = "sarah.johnson"

_QUESTIONS: tuple[tuple[str, str, int, str, tuple[str, ...], int, str], ...] = (
    # HTML
    ("HTML", "easy", 1,
     "What is the difference between <div> and <span> elements?",
     ("<div> is block-level, <span> is inline",
      "<div> is inline, <span> is block-level",
      "They are exactly the same",
      "<div> is for text, <span> is for images"),
     0, "<div> is a block-level element that takes full width, while <span> is "
        "an inline element that only takes necessary width."),
    ("HTML", "easy", 1,
     "Which HTML5 semantic element should be used for the main content area?",
     ("<section>", "<article>", "<main>", "<content>"),
     2, "The <main> element represents the main content area of the document."),
    ("HTML", "easy", 1,
     "What does the 'alt' attribute in <img> tag provide?",
     ("Alternative text for screen readers and when image fails to load",
      "Image alignment", "Image size", "Image filter"),
     0, "The alt attribute provides alternative text for accessibility and when "
        "images fail to load."),
    ("HTML", "medium", 2,
     "Which HTML element is used to group form controls?",
     ("<group>", "<fieldset>", "<formgroup>", "<section>"),
     1, "The <fieldset> element is used to group related form controls together."),
    ("HTML", "medium", 2,
     "What is the purpose of the 'doctype' declaration?",
     ("Defines the HTML version and rendering mode", "Sets the page title",
      "Links external stylesheets", "Defines character encoding"),
     0, "The doctype declaration tells the browser which HTML version to use and "
        "triggers standards mode."),
    # CSS
    ("CSS", "easy", 1,
     "What does CSS stand for?",
     ("Computer Style Sheets", "Cascading Style Sheets",
      "Creative Style Sheets", "Colorful Style Sheets"),
     1, "CSS stands for Cascading Style Sheets, used for styling HTML documents."),
    ("CSS", "easy", 1,
     "Which CSS property is used to change text color?",
     ("font-color", "text-color", "color", "foreground-color"),
     2, "The 'color' property is used to set the text color in CSS."),
    ("CSS", "easy", 1,
     "What is the difference between 'margin' and 'padding'?",
     ("Margin is inside the border, padding is outside",
      "Margin is outside the border, padding is inside",
      "They are the same thing",
      "Margin is for text, padding is for images"),
     1, "Margin creates space outside the element's border, while padding "
        "creates space inside the border."),
    ("CSS", "medium", 2,
     "Which CSS unit is relative to the font size of the root element?",
     ("em", "rem", "px", "vh"),
     1, "'rem' units are relative to the root element's font size, while 'em' "
        "is relative to the parent element."),
    ("CSS", "medium", 2,
     "What does the CSS 'box-sizing: border-box' property do?",
     ("Includes padding and border in element's total width/height",
      "Excludes padding and border from width/height",
      "Only includes border in calculations",
      "Only includes padding in calculations"),
     0, "border-box includes padding and border in the element's total width "
        "and height calculations."),
    ("CSS", "hard", 3,
     "Which CSS property is used to create a flexible layout?",
     ("display: block", "display: flex", "display: inline", "display: table"),
     1, "display: flex enables flexbox layout for creating flexible and "
        "responsive designs."),
    # JavaScript
    ("JavaScript", "easy", 1,
     "Which method is used to add an element to the end of an array?",
     ("append()", "push()", "add()", "insert()"),
     1, "The push() method adds one or more elements to the end of an array."),
    ("JavaScript", "easy", 1,
     "What is the difference between '==' and '===' in JavaScript?",
     ("'==' checks type and value, '===' checks only value",
      "'==' checks only value, '===' checks type and value",
      "They are exactly the same",
      "'==' is for numbers, '===' is for strings"),
     1, "'==' performs type coercion and checks value, while '===' checks both "
        "type and value without coercion."),
    ("JavaScript", "easy", 1,
     "Which keyword is used to declare a block-scoped variable?",
     ("var", "let", "const", "Both let and const"),
     3, "Both 'let' and 'const' create block-scoped variables, unlike 'var' "
        "which is function-scoped."),
    ("JavaScript", "medium", 2,
     "What does the 'this' keyword refer to in JavaScript?",
     ("The current function", "The global object",
      "The object that invokes the function", "The parent function"),
     2, "'this' refers to the object that is executing the current function, "
        "which can vary based on how the function is called."),
    ("JavaScript", "medium", 2,
     "Which method creates a new array with all elements that pass a test?",
     ("map()", "filter()", "reduce()", "forEach()"),
     1, "The filter() method creates a new array with elements that pass the "
        "test implemented by the provided function."),
    ("JavaScript", "hard", 3,
     "What is a closure in JavaScript?",
     ("A function that returns another function",
      "A function with access to variables in its outer scope",
      "A function that calls itself",
      "A function without parameters"),
     1, "A closure is a function that has access to variables in its outer "
        "(enclosing) scope even after the outer function returns."),
    # React
    ("React", "easy", 1,
     "What is JSX in React?",
     ("JavaScript Extension", "JavaScript XML", "JSON Extension",
      "Java Syntax Extension"),
     1, "JSX stands for JavaScript XML, which allows writing HTML elements in "
        "JavaScript."),
    ("React", "easy", 1,
     "Which hook is used to manage state in functional components?",
     ("useEffect", "useState", "useContext", "useReducer"),
     1, "useState is the hook used to add state management to functional "
        "components."),
    ("React", "medium", 2,
     "What is the purpose of the useEffect hook?",
     ("To manage component state", "To handle side effects",
      "To create context", "To optimize performance"),
     1, "useEffect is used to handle side effects like API calls, subscriptions, "
        "and DOM manipulation."),
    ("React", "medium", 2,
     "What is the virtual DOM in React?",
     ("A copy of the real DOM in memory", "A server-side DOM",
      "A database representation of the DOM", "A CSS representation of the DOM"),
     0, "The virtual DOM is a JavaScript representation of the actual DOM that "
        "React uses for efficient updates."),
    ("React", "hard", 3,
     "Which pattern is used to pass data through the component tree without "
     "prop drilling?",
     ("Props", "State", "Context", "Refs"),
     2, "React Context provides a way to pass data through the component tree "
        "without prop drilling."),
    # Node.js
    ("Node.js", "easy", 1,
     "What is Node.js primarily used for?",
     ("Frontend development", "Server-side JavaScript",
      "Database management", "Mobile app development"),
     1, "Node.js is a runtime environment for executing JavaScript on the "
        "server side."),
    ("Node.js", "easy", 1,
     "Which module is used to create HTTP servers in Node.js?",
     ("fs", "path", "http", "url"),
     2, "The 'http' module is used to create HTTP servers and clients in Node.js."),
    ("Node.js", "easy", 1,
     "What is npm?",
     ("Node Package Manager", "New Programming Method",
      "Network Protocol Manager", "Node Process Manager"),
     0, "npm is the Node Package Manager, used to install and manage JavaScript "
        "packages."),
    ("Node.js", "medium", 2,
     "What is the purpose of package.json?",
     ("Contains project metadata and dependencies", "Stores application data",
      "Configures the server", "Defines database schema"),
     0, "package.json contains project metadata, dependencies, scripts, and "
        "configuration information."),
    ("Node.js", "medium", 2,
     "Which Node.js module is used for file system operations?",
     ("file", "fs", "system", "io"),
     1, "The 'fs' (file system) module provides APIs for interacting with the "
        "file system."),
    # TypeScript
    ("TypeScript", "easy", 1,
     "What is TypeScript?",
     ("A JavaScript runtime", "A superset of JavaScript with static typing",
      "A database language", "A CSS preprocessor"),
     1, "TypeScript is a superset of JavaScript that adds static type checking."),
    ("TypeScript", "easy", 1,
     "Which keyword is used to define a TypeScript interface?",
     ("type", "interface", "class", "struct"),
     1, "The 'interface' keyword is used to define the structure of an object "
        "in TypeScript."),
    ("TypeScript", "medium", 2,
     "What is the difference between 'interface' and 'type' in TypeScript?",
     ("They are exactly the same", "Interface can be extended, type cannot",
      "Interface can be merged, type cannot",
      "Type is for primitives, interface is for objects"),
     2, "Interfaces can be merged (declaration merging) while types cannot. "
        "Both can be extended."),
    ("TypeScript", "medium", 2,
     "What does the '?' symbol mean in TypeScript?",
     ("Required property", "Optional property", "Nullable property",
      "Private property"),
     1, "The '?' symbol marks a property as optional in TypeScript interfaces "
        "and types."),
    ("TypeScript", "hard", 3,
     "What is a union type in TypeScript?",
     ("A type that combines multiple interfaces",
      "A type that can be one of several types",
      "A type that extends another type",
      "A type for database unions"),
     1, "A union type allows a value to be one of several types, defined using "
        "the '|' operator."),
    # Database
    ("Database", "easy", 1,
     "What does SQL stand for?",
     ("Structured Query Language", "Simple Query Language",
      "Standard Query Language", "System Query Language"),
     0, "SQL stands for Structured Query Language, used for managing relational "
        "databases."),
    ("Database", "easy", 1,
     "Which SQL command is used to retrieve data?",
     ("GET", "FETCH", "SELECT", "RETRIEVE"),
     2, "SELECT is the SQL command used to retrieve data from database tables."),
    ("Database", "easy", 1,
     "What is a primary key?",
     ("A key that unlocks the database", "A unique identifier for each record",
      "The first column in a table", "A password for database access"),
     1, "A primary key is a unique identifier for each record in a database "
        "table."),
    ("Database", "medium", 2,
     "What is the difference between INNER JOIN and LEFT JOIN?",
     ("INNER JOIN returns all records, LEFT JOIN returns matched records only",
      "INNER JOIN returns matched records only, LEFT JOIN returns all records "
      "from left table",
      "They are the same",
      "INNER JOIN is faster than LEFT JOIN"),
     1, "INNER JOIN returns only matched records, while LEFT JOIN returns all "
        "records from the left table plus matched records from the right table."),
)


def build_seed_questions(created_by: str = SEED_AUTHOR) -> list[Question]:
    return [
        Question.new(
            question=text,
            category=category,
            difficulty=difficulty,  # type: ignore[arg-type]
            options=options,
            correct_answer=ChoiceAnswer(value=correct),
            explanation=explanation,
            points=points,
            created_by=created_by,
        )
        for category, difficulty, points, text, options, correct, explanation in _QUESTIONS
    ]


async def seed_question_bank(
    repo: QuestionRepo, created_by: str = SEED_AUTHOR
) -> list[Question]:
    """Insert the starter questions.  Not idempotent: each call adds a copy."""
    questions = build_seed_questions(created_by)
    await question_bank.add_questions(repo, questions)

    by_category = Counter(q.category for q in questions)
    logger.info("Seeded %d questions into the question bank", len(questions))
    for category, count in by_category.items():
        logger.info("  %s: %d questions", category, count)
    return questions
