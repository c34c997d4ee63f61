import json
import os
import sys

# Add the current directory to sys.path so we can import recipeshare
sys.path.append(os.getcwd())

from recipeshare.main import app

def generate_openapi(output_file="openapi.json"):
    print("Generating OpenAPI schema...")
    openapi_schema = app.openapi()

    with open(output_file, "w") as f:
        json.dump(openapi_schema, f, indent=2)

    print(f"OpenAPI schema for {len(openapi_schema.get('paths', {}))} paths saved to {output_file}")

if __name__ == "__main__":
    generate_openapi(sys.argv[1] if len(sys.argv) > 1 else "openapi.json")
