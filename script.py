import logging
import os

from sheetsight.env_loader import get_settings, load_environment
from sheetsight import AppController, describe_sheet


def choose_sheet(controller: AppController, input_fn=input):
    workbook = controller.state.workbook
    if len(workbook) == 1:
        return
    for i, sheet in enumerate(workbook.sheets):
        print(f"  [{i}] {sheet.label}")
    choice = input_fn("📑 Pick a sheet number (Enter for 0): ").strip()
    if choice.isdigit() and int(choice) < len(workbook):
        controller.switch_sheet(int(choice))


def main(input_fn=input, controller: AppController = None):
    controller = controller or AppController(settings=get_settings())

    print("📂 Uploading and Reading the File...")
    file_path = input_fn("📂 Enter path to your file (CSV/XLSX/XLS): ").strip()

    try:
        with open(file_path, 'rb') as f:
            data = f.read()
    except OSError as e:
        print(f"❌ Could not read {file_path}: {e}")
        return

    if not controller.load_file(data, os.path.basename(file_path)):
        print(f"❌ {controller.state.error}")
        return

    print("✅ Tabular dataset loaded successfully.")
    choose_sheet(controller, input_fn)
    print(describe_sheet(controller.state.active_sheet))

    while True:
        user_question = input_fn("\n💬 Your Question (or type 'exit'): ").strip()
        if user_question.lower() in ['exit', 'quit']:
            print("👋 Exiting the assistant. Goodbye!")
            break
        if not user_question:
            continue

        answer = controller.analyze(user_question)
        if answer is not None:
            print("🧠 Answer:\n", answer)
        else:
            print(f"⚠️ {controller.state.error}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    load_environment()
    main()
