"""Hello World -- the simplest stache example.

Compile a template from a string and render it with a scope.

Run:
    python app.py
"""

from stache import compile

# Compile once
template = compile("Hello, {{ name }}!")

# Render with a scope
output = template.render({"name": "World"})


def main() -> None:
    print(output)
    print()

    # Multiple renders with different scopes
    for name in ["Stache", "Mustache", "Python"]:
        print(template.render({"name": name}))


if __name__ == "__main__":
    main()
