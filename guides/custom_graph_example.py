"""Example showing the run executor on a hand-built fan-out/fan-in graph."""

import asyncio

from scriptflow import RunExecutor, Step, WorkflowGraph


async def main():
    words = ["fan", "out", "fan", "in"]

    async def measure(ctx):
        await asyncio.sleep(0.1 * len(ctx.input))
        return len(ctx.input)

    async def total(ctx):
        return sum(ctx.results.output(step_id) for step_id in ctx.results.scope)

    graph = WorkflowGraph.fan_out_fan_in(
        "word-lengths",
        words,
        lambda i, word: Step(id=f"measure_{i}", execute=measure, input=word, index=i),
        lambda ids: Step(id="total", execute=total, depends_on=ids, output_type=int),
    )

    # Steps run concurrently; the sink waits for all of them
    result = await RunExecutor(timeout=5).run(graph, trigger=None)
    print(f"Total length: {result}")


if __name__ == "__main__":
    asyncio.run(main())
