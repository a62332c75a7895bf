import asyncio
import inspect

import pytest

from component_converter.plugins.registry import restore_registry, snapshot_registry


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run async test functions without requiring external plugins."""
    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            sig = inspect.signature(test_function)
            filtered_args = {k: v for k, v in pyfuncitem.funcargs.items() if k in sig.parameters}
            loop.run_until_complete(test_function(**filtered_args))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
        return True
    return None


def pytest_configure(config):
    """Register markers for pytest."""
    config.addinivalue_line("markers", "asyncio: mark async tests")


BUTTON_SOURCE = '''\
import * as React from "react"
import { Slot } from "@radix-ui/react-slot"
import { cva, type VariantProps } from "class-variance-authority"

import { cn } from "@/lib/utils"

const buttonVariants = cva(
  "inline-flex items-center justify-center rounded-md text-sm font-medium",
  {
    variants: {
      variant: {
        default: "bg-primary text-primary-foreground",
        destructive: "bg-destructive text-destructive-foreground",
        outline: "border border-input bg-background",
      },
      size: {
        default: "h-10 px-4 py-2",
        sm: "h-9 rounded-md px-3",
        lg: "h-11 rounded-md px-8",
      },
    },
    defaultVariants: {
      variant: "default",
      size: "default",
    },
  }
)

export interface ButtonProps
  extends React.ButtonHTMLAttributes<HTMLButtonElement>,
    VariantProps<typeof buttonVariants> {
  asChild?: boolean
}

const Button = React.forwardRef<HTMLButtonElement, ButtonProps>(
  ({ className, variant, size, asChild = false, ...props }, ref) => {
    const Comp = asChild ? Slot : "button"
    return (
      <Comp
        className={cn(buttonVariants({ variant, size, className }))}
        ref={ref}
        {...props}
      />
    )
  }
)
Button.displayName = "Button"

export { Button, buttonVariants }
'''


SWITCH_SOURCE = '''\
import * as React from "react"

import { cn } from "@/lib/utils"

export function ToggleSwitch({ checked, onCheckedChange, disabled, className, ...rest }) {
  return (
    <button
      className={cn("peer inline-flex h-6 w-11 rounded-full data-[state=checked]:bg-primary", className)}
      {...rest}
    >
      <span className="block h-5 w-5 rounded-full data-[state=checked]:translate-x-5" />
    </button>
  )
}
'''


TABS_SOURCE = '''\
import * as React from "react"
import * as TabsPrimitive from "@radix-ui/react-tabs"

import { cn } from "@/lib/utils"

const Tabs = TabsPrimitive.Root

const TabsList = React.forwardRef<
  React.ElementRef<typeof TabsPrimitive.List>,
  React.ComponentPropsWithoutRef<typeof TabsPrimitive.List>
>(({ className, ...props }, ref) => (
  <TabsPrimitive.List
    ref={ref}
    className={cn("inline-flex h-10 items-center rounded-md bg-muted p-1", className)}
    {...props}
  />
))
TabsList.displayName = TabsPrimitive.List.displayName

const TabsTrigger = React.forwardRef<
  React.ElementRef<typeof TabsPrimitive.Trigger>,
  React.ComponentPropsWithoutRef<typeof TabsPrimitive.Trigger>
>(({ className, ...props }, ref) => (
  <TabsPrimitive.Trigger
    ref={ref}
    className={cn("inline-flex items-center data-[state=active]:bg-background", className)}
    {...props}
  />
))
TabsTrigger.displayName = TabsPrimitive.Trigger.displayName

export { Tabs, TabsList, TabsTrigger }
'''


BADGE_SOURCE = '''\
import { cva } from "class-variance-authority"

const badgeVariants = cva("inline-flex rounded-full border px-2.5", {
  variants: {
    variant: {
      default: "A",
      destructive: "B",
    },
  },
  defaultVariants: {
    variant: "default",
  },
})

function Badge({ className, variant, ...props }) {
  return <div className={cn(badgeVariants({ variant }), className)} {...props} />
}

export { Badge, badgeVariants }
'''


PANEL_SOURCE = '''\
import * as React from "react"

interface PanelProps {
  className?: string
  title?: string
}

const Panel = React.forwardRef<HTMLDivElement, PanelProps>((props, forwardedRef) => {
  return null
})
'''


COUNTER_SOURCE = '''\
import * as React from "react"

export function Counter({ start = 0 }) {
  const [count, setCount] = React.useState(start)
  React.useEffect(() => {
    document.title = `Count ${count}`
  }, [count])
  return <span className="counter">{count}</span>
}
'''


ALERT_SOURCE = '''\
export function Alert({ title, open, children }) {
  return (
    <div role="alert">
      {title && <h5 className="font-medium">{title}</h5>}
      {open ? <span>Open</span> : <span>Closed</span>}
      <img src={title} alt="" />
      {children}
    </div>
  )
}
'''


@pytest.fixture
def button_source():
    return BUTTON_SOURCE


@pytest.fixture
def switch_source():
    return SWITCH_SOURCE


@pytest.fixture
def tabs_source():
    return TABS_SOURCE


@pytest.fixture
def badge_source():
    return BADGE_SOURCE


@pytest.fixture
def panel_source():
    return PANEL_SOURCE


@pytest.fixture
def counter_source():
    return COUNTER_SOURCE


@pytest.fixture
def alert_source():
    return ALERT_SOURCE


@pytest.fixture
def isolated_registry():
    """Restore the plugin registry after a test registers its own plugins."""
    snapshot = snapshot_registry()
    try:
        yield
    finally:
        restore_registry(snapshot)
